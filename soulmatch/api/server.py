from fastapi import FastAPI, Depends, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from soulmatch.api.schemas import *
from soulmatch.core import config
from soulmatch.core.exceptions import SoulmatchError, PermissionDenied, RequestAlreadyDecided
from soulmatch.services.chat_service import ChatRequestService, STATUS_PENDING
from soulmatch.services.compatibility import match_score
from soulmatch.services.interaction_service import InteractionService
from soulmatch.services.matching_service import MatchingService, is_reciprocal_match
from soulmatch.services.post_service import PostService
from soulmatch.services.profile_service import ProfileService
from soulmatch.services.banner_service import BannerService
from soulmatch.services.settings_service import SettingsService
import hmac
import logging

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SoulMatch API",
    description="API per profili, interazioni, richieste di chat e bacheca di SoulMatch",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db():
    from soulmatch.models.database import Session as DB_Session
    session = DB_Session()
    try:
        yield session
    finally:
        session.close()


settings_service = SettingsService()


def get_settings_service() -> SettingsService:
    return settings_service


def get_optional_user(x_user_id: Optional[int] = Header(None)) -> Optional[int]:
    return x_user_id


def get_current_user(x_user_id: Optional[int] = Header(None)) -> int:
    if x_user_id is None:
        raise PermissionDenied("Devi essere iscritto!")
    return x_user_id


def require_admin(x_admin_token: Optional[str] = Header(None)) -> bool:
    if not x_admin_token or not hmac.compare_digest(x_admin_token, config.ADMIN_TOKEN):
        raise PermissionDenied("Accesso riservato agli amministratori")
    return True


def _require_owner(current_user: int, profile_id: int):
    if current_user != profile_id:
        raise PermissionDenied("Puoi modificare solo il tuo profilo")


@app.exception_handler(SoulmatchError)
async def soulmatch_error_handler(request: Request, exc: SoulmatchError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/", tags=["Health"])
async def root():
    return {"message": "SoulMatch API attiva", "version": "1.0.0"}


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": "soulmatch-api"}


@app.post("/profiles", response_model=ProfileResponse, tags=["Profiles"])
async def register_profile(profile_data: ProfileCreate, db: Session = Depends(get_db)):
    profile = ProfileService.create_profile(db, profile_data.model_dump())
    return ProfileService.serialize(db, profile)


@app.get("/profiles", response_model=List[ProfileResponse], tags=["Profiles"])
async def browse_profiles(gender: Optional[str] = None, orientation: Optional[str] = None,
                          city: Optional[str] = None, body_type: Optional[str] = None,
                          age_min: Optional[int] = None, age_max: Optional[int] = None,
                          viewer_id: Optional[int] = Depends(get_optional_user),
                          db: Session = Depends(get_db)):
    filters = {
        "gender": gender,
        "orientation": orientation,
        "city": city,
        "body_type": body_type,
        "age_min": age_min,
        "age_max": age_max,
    }
    return MatchingService.browse_profiles(db, viewer_id, filters)


@app.get("/profiles/{profile_id}", response_model=ProfileResponse, tags=["Profiles"])
async def get_profile(profile_id: int, db: Session = Depends(get_db)):
    return ProfileService.get_profile(db, profile_id)


@app.put("/profiles/{profile_id}", response_model=ProfileResponse, tags=["Profiles"])
async def update_profile(profile_id: int, profile_data: ProfileUpdate,
                         current_user: int = Depends(get_current_user), db: Session = Depends(get_db)):
    _require_owner(current_user, profile_id)
    profile = ProfileService.update_profile(db, profile_id, profile_data.model_dump(exclude_unset=True))
    return ProfileService.serialize(db, profile)


@app.post("/profiles/{profile_id}/online", response_model=ProfileResponse, tags=["Profiles"])
async def set_online(profile_id: int, data: OnlineUpdate,
                     current_user: int = Depends(get_current_user), db: Session = Depends(get_db)):
    _require_owner(current_user, profile_id)
    profile = ProfileService.set_online(db, profile_id, data.online)
    return ProfileService.serialize(db, profile)


@app.delete("/profiles/{profile_id}", tags=["Admin"])
async def delete_profile(profile_id: int, admin: bool = Depends(require_admin), db: Session = Depends(get_db)):
    ProfileService.delete_profile(db, profile_id)
    return {"success": True}


@app.get("/profiles/{profile_id}/compatibility", response_model=CompatibilityResponse, tags=["Matching"])
async def profile_compatibility(profile_id: int, current_user: int = Depends(get_current_user),
                                db: Session = Depends(get_db)):
    result = MatchingService.compatibility(db, current_user, profile_id)
    return CompatibilityResponse(score=result["score"], mutual=result["mutual"])


@app.post("/compatibility", response_model=CompatibilityResponse, tags=["Matching"])
async def compatibility(data: CompatibilityRequest):
    mutual = None
    if data.viewer is not None and data.candidate is not None:
        mutual = is_reciprocal_match(data.viewer, data.candidate)
    return CompatibilityResponse(score=match_score(data.viewer, data.candidate), mutual=mutual)


@app.post("/profiles/{profile_id}/interactions", response_model=ToggleResponse, tags=["Interactions"])
async def toggle_profile_interaction(profile_id: int, interaction_data: InteractionCreate,
                                     current_user: int = Depends(get_current_user),
                                     db: Session = Depends(get_db)):
    return InteractionService.record_interaction(db, current_user, profile_id, interaction_data.type)


@app.get("/profiles/{profile_id}/interactions", response_model=InteractionState, tags=["Interactions"])
async def profile_interaction_state(profile_id: int, viewer_id: Optional[int] = Depends(get_optional_user),
                                    db: Session = Depends(get_db)):
    ProfileService.get_profile_or_404(db, profile_id)
    kinds = InteractionService.list_interaction_kinds(db, viewer_id, profile_id) if viewer_id else set()
    counts = InteractionService.profile_counts(db, profile_id)
    return InteractionState(kinds=sorted(kinds), **counts)


@app.post("/chat-requests", response_model=ChatRequestResponse, tags=["Chat"])
async def create_chat_request(request_data: ChatRequestCreate, current_user: int = Depends(get_current_user),
                              db: Session = Depends(get_db)):
    if request_data.instant:
        request = ChatRequestService.request_instant_chat(
            db, current_user, request_data.to_profile_id, request_data.message)
    else:
        request = ChatRequestService.send_offline_message(
            db, current_user, request_data.to_profile_id, request_data.message)
    return _chat_request_response(request)


@app.get("/chat-requests", response_model=List[PendingChatRequest], tags=["Chat"])
async def pending_chat_requests(current_user: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return ChatRequestService.pending_requests_for(db, current_user)


@app.patch("/chat-requests/{request_id}", response_model=ChatRequestResponse, tags=["Chat"])
async def respond_chat_request(request_id: int, decision: ChatRequestDecision,
                               current_user: int = Depends(get_current_user), db: Session = Depends(get_db)):
    request = ChatRequestService.get_request(db, request_id)
    if request.to_profile_id != current_user:
        raise PermissionDenied("Solo il destinatario può rispondere alla richiesta")
    if request.status != STATUS_PENDING:
        raise RequestAlreadyDecided("La richiesta è già stata gestita.")
    request = ChatRequestService.respond(db, request_id, decision.status)
    return _chat_request_response(request)


@app.get("/chat-status/{from_profile_id}/{to_profile_id}", response_model=ChatStatusResponse, tags=["Chat"])
async def chat_status(from_profile_id: int, to_profile_id: int, db: Session = Depends(get_db)):
    return ChatStatusResponse(status=ChatRequestService.get_status(db, from_profile_id, to_profile_id))


def _chat_request_response(request) -> ChatRequestResponse:
    return ChatRequestResponse(
        id=request.id,
        from_profile_id=request.from_profile_id,
        to_profile_id=request.to_profile_id,
        status=request.status,
        message=request.message,
        created_at=request.created_at.isoformat()
    )


@app.post("/posts", response_model=PostResponse, tags=["Posts"])
async def create_post(post_data: PostCreate, current_user: int = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    post = PostService.create_post(db, current_user, post_data.photos, post_data.description)
    return PostService.serialize(db, post, current_user)


@app.get("/posts", response_model=List[PostResponse], tags=["Posts"])
async def list_posts(viewer_id: Optional[int] = Depends(get_optional_user), db: Session = Depends(get_db)):
    return PostService.list_posts(db, caller_id=viewer_id)


@app.get("/profiles/{profile_id}/posts", response_model=List[PostResponse], tags=["Posts"])
async def list_profile_posts(profile_id: int, viewer_id: Optional[int] = Depends(get_optional_user),
                             db: Session = Depends(get_db)):
    return PostService.list_posts(db, caller_id=viewer_id, author_id=profile_id)


@app.post("/posts/{post_id}/interactions", response_model=ToggleResponse, tags=["Interactions"])
async def toggle_post_interaction(post_id: int, interaction_data: InteractionCreate,
                                  current_user: int = Depends(get_current_user),
                                  db: Session = Depends(get_db)):
    return InteractionService.record_post_interaction(db, current_user, post_id, interaction_data.type)


@app.get("/banner-messages", tags=["Banner"])
async def list_banner_messages(db: Session = Depends(get_db)):
    return BannerService.list_active(db)


@app.post("/banner-messages", tags=["Banner"])
async def post_banner_message(data: BannerMessageCreate, current_user: int = Depends(get_current_user),
                              db: Session = Depends(get_db)):
    banner = BannerService.post_message(db, current_user, data.message)
    return {"success": True, "id": banner.id}


@app.delete("/banner-messages/{banner_id}", tags=["Banner"])
async def delete_banner_message(banner_id: int, admin: bool = Depends(require_admin),
                                db: Session = Depends(get_db)):
    BannerService.delete_message(db, banner_id)
    return {"success": True}


@app.post("/banner-messages/{banner_id}/replies", tags=["Banner"])
async def reply_banner_message(banner_id: int, data: BannerReplyCreate,
                               current_user: int = Depends(get_current_user), db: Session = Depends(get_db)):
    reply = BannerService.reply(db, banner_id, current_user, data.reply_text)
    return {"success": True, "id": reply.id}


@app.get("/profiles/{profile_id}/banner", tags=["Banner"])
async def profile_banner(profile_id: int, db: Session = Depends(get_db)):
    return BannerService.get_profile_banner(db, profile_id)


@app.get("/settings/{key}", tags=["Settings"])
async def get_setting(key: str, db: Session = Depends(get_db),
                      settings: SettingsService = Depends(get_settings_service)):
    return settings.get_setting(db, key)


@app.post("/settings/{key}", tags=["Settings"])
async def update_setting(key: str, data: SettingUpdate, admin: bool = Depends(require_admin),
                         db: Session = Depends(get_db),
                         settings: SettingsService = Depends(get_settings_service)):
    settings.set_setting(db, key, data.value)
    return {"success": True}


@app.get("/admin/profiles", response_model=List[ProfileResponse], tags=["Admin"])
async def admin_list_profiles(admin: bool = Depends(require_admin), db: Session = Depends(get_db)):
    return ProfileService.list_profiles(db)


@app.post("/admin/profiles/{profile_id}/validate", response_model=ProfileResponse, tags=["Admin"])
async def admin_validate_profile(profile_id: int, admin: bool = Depends(require_admin),
                                 db: Session = Depends(get_db)):
    profile = ProfileService.validate_profile(db, profile_id)
    return ProfileService.serialize(db, profile)


@app.post("/admin/profiles/{profile_id}/premium", response_model=ProfileResponse, tags=["Admin"])
async def admin_set_premium(profile_id: int, data: FlagUpdate, admin: bool = Depends(require_admin),
                            db: Session = Depends(get_db)):
    profile = ProfileService.set_premium(db, profile_id, data.value)
    return ProfileService.serialize(db, profile)


@app.post("/admin/profiles/{profile_id}/block", response_model=ProfileResponse, tags=["Admin"])
async def admin_block_profile(profile_id: int, data: FlagUpdate, admin: bool = Depends(require_admin),
                              db: Session = Depends(get_db)):
    profile = ProfileService.block_profile(db, profile_id, data.value)
    return ProfileService.serialize(db, profile)


@app.post("/admin/profiles/{profile_id}/suspend", response_model=ProfileResponse, tags=["Admin"])
async def admin_suspend_profile(profile_id: int, data: FlagUpdate, admin: bool = Depends(require_admin),
                                db: Session = Depends(get_db)):
    profile = ProfileService.suspend_profile(db, profile_id, data.value)
    return ProfileService.serialize(db, profile)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("API server shutting down...")


if __name__ == "__main__":
    import uvicorn
    from soulmatch.models import init_db

    init_db()
    logger.info("API server started")
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
