from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from .database import Base, utcnow


class BannerMessage(Base):
    __tablename__ = "banner_messages"

    id = Column(Integer, primary_key=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    author = relationship("Profile")
    replies = relationship("BannerReply", back_populates="banner_message", cascade="all, delete-orphan")


class BannerReply(Base):
    __tablename__ = "banner_replies"

    id = Column(Integer, primary_key=True)
    banner_message_id = Column(Integer, ForeignKey("banner_messages.id"), nullable=False, index=True)
    from_profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    reply_text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    banner_message = relationship("BannerMessage", back_populates="replies")
    author = relationship("Profile")


class SiteSetting(Base):
    __tablename__ = "site_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text)
