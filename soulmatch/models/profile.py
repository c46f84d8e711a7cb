from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text
from sqlalchemy.orm import relationship
from .database import Base, utcnow
from .types import TagList, JSONList, StringMap


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    nickname = Column(String(100))
    email = Column(String(255))
    dob = Column(Date)
    city = Column(String(100), nullable=False)
    province = Column(String(100))
    job = Column(String(100))
    description = Column(Text)
    hobbies = Column(Text)
    desires = Column(Text)
    gender = Column(String(20))
    orientation = Column(TagList, default=list)
    body_type = Column(String(50))
    height_cm = Column(Integer)

    looking_for_gender = Column(TagList, default=list)
    looking_for_age_min = Column(Integer)
    looking_for_age_max = Column(Integer)
    looking_for_job = Column(String(100))
    looking_for_hobbies = Column(Text)
    looking_for_city = Column(String(100))
    looking_for_height = Column(String(50))
    looking_for_body_type = Column(String(50))
    looking_for_other = Column(Text)

    is_paid = Column(Boolean, default=False, nullable=False)
    is_online = Column(Boolean, default=False, nullable=False)
    is_validated = Column(Boolean, default=False, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    is_suspended = Column(Boolean, default=False, nullable=False)

    photo_url = Column(Text)
    photos = Column(JSONList, default=list)
    id_document_url = Column(Text)
    getting_to_know = Column(StringMap, default=dict)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    posts = relationship("Post", back_populates="author")
    sent_interactions = relationship("Interaction", foreign_keys="Interaction.from_profile_id", back_populates="from_profile")
    received_interactions = relationship("Interaction", foreign_keys="Interaction.to_profile_id", back_populates="to_profile")

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.surname}".strip()
