from pydantic import BaseModel, Field
from typing import Any, Optional, List, Dict, Literal
from datetime import date


class LookingFor(BaseModel):
    gender: List[str] = Field(default_factory=list, description="Generi cercati, 'Tutti' per chiunque")
    age_min: Optional[int] = Field(None, ge=18, le=120, description="Età minima cercata")
    age_max: Optional[int] = Field(None, ge=18, le=120, description="Età massima cercata")
    job: Optional[str] = None
    hobbies: Optional[str] = None
    city: Optional[str] = None
    height: Optional[str] = None
    body_type: Optional[str] = None
    other: Optional[str] = None


class ProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Nome")
    surname: str = Field(..., min_length=1, max_length=100, description="Cognome")
    dob: date = Field(..., description="Data di nascita")
    city: str = Field(..., min_length=1, max_length=100, description="Città")
    province: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    job: Optional[str] = None
    description: Optional[str] = Field(None, description="Descrizione libera")
    hobbies: Optional[str] = Field(None, description="Hobby separati da virgola")
    desires: Optional[str] = None
    gender: Optional[str] = Field(None, description="Uomo/Donna/...")
    orientation: List[str] = Field(default_factory=list)
    body_type: Optional[str] = None
    height_cm: Optional[int] = Field(None, ge=50, le=260)
    looking_for: LookingFor = Field(default_factory=LookingFor)
    photo_url: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    id_document_url: Optional[str] = None
    getting_to_know: Dict[str, str] = Field(default_factory=dict)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    surname: Optional[str] = Field(None, min_length=1, max_length=100)
    dob: Optional[date] = None
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    province: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    job: Optional[str] = None
    description: Optional[str] = None
    hobbies: Optional[str] = None
    desires: Optional[str] = None
    gender: Optional[str] = None
    orientation: Optional[List[str]] = None
    body_type: Optional[str] = None
    height_cm: Optional[int] = Field(None, ge=50, le=260)
    looking_for: Optional[LookingFor] = None
    photo_url: Optional[str] = None
    photos: Optional[List[str]] = None
    id_document_url: Optional[str] = None
    getting_to_know: Optional[Dict[str, str]] = None


class ProfileResponse(BaseModel):
    id: int
    name: str
    surname: str
    nickname: Optional[str]
    dob: Optional[str]
    age: int
    city: str
    province: Optional[str]
    job: Optional[str]
    description: Optional[str]
    hobbies: Optional[str]
    desires: Optional[str]
    gender: Optional[str]
    orientation: List[str]
    body_type: Optional[str]
    height_cm: Optional[int]
    looking_for: LookingFor
    is_paid: bool
    is_online: bool
    is_validated: bool
    is_blocked: bool
    is_suspended: bool
    photo_url: Optional[str]
    photos: List[str]
    id_document_url: Optional[str]
    getting_to_know: Dict[str, str]
    likes_count: int
    hearts_count: int
    created_at: Optional[str]
    match_score: Optional[int] = None


class ProfileSnapshot(BaseModel):
    """Just the fields the compatibility score reads"""
    id: Optional[int] = None
    dob: Optional[str] = None
    city: Optional[str] = None
    hobbies: Optional[str] = None
    gender: Optional[str] = None
    orientation: List[str] = Field(default_factory=list)
    looking_for_gender: List[str] = Field(default_factory=list)


class CompatibilityRequest(BaseModel):
    viewer: Optional[ProfileSnapshot] = None
    candidate: Optional[ProfileSnapshot] = None


class CompatibilityResponse(BaseModel):
    score: int
    mutual: Optional[bool] = None


class OnlineUpdate(BaseModel):
    online: bool


class FlagUpdate(BaseModel):
    value: bool = True


class InteractionCreate(BaseModel):
    type: Literal["like", "heart"] = Field(..., description="Tipo di interazione: like/heart")


class ToggleResponse(BaseModel):
    success: bool
    toggled: bool


class InteractionState(BaseModel):
    likes_count: int
    hearts_count: int
    kinds: List[str]


class ChatRequestCreate(BaseModel):
    to_profile_id: int
    message: Optional[str] = Field(None, max_length=1000)
    instant: bool = Field(False, description="Chat istantanea: il destinatario deve essere online")


class ChatRequestResponse(BaseModel):
    id: int
    from_profile_id: int
    to_profile_id: int
    status: str
    message: Optional[str]
    created_at: str


class ChatRequestDecision(BaseModel):
    status: Literal["approved", "rejected"]


class PendingChatRequest(ChatRequestResponse):
    name: str
    surname: str
    photo_url: Optional[str]


class ChatStatusResponse(BaseModel):
    status: str


class PostCreate(BaseModel):
    photos: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class PostResponse(BaseModel):
    id: int
    profile_id: int
    author_name: Optional[str]
    author_photo: Optional[str]
    photos: List[str]
    description: Optional[str]
    created_at: str
    likes_count: int
    hearts_count: int
    has_liked: bool
    has_hearted: bool


class BannerMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=500)


class BannerReplyCreate(BaseModel):
    reply_text: str = Field(..., min_length=1, max_length=500)


class SettingUpdate(BaseModel):
    value: Any
