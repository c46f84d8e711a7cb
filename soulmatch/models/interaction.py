from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base, utcnow


class Interaction(Base):
    __tablename__ = "interactions"
    __table_args__ = (
        UniqueConstraint("from_profile_id", "to_profile_id", "type", name="uq_interaction_edge"),
    )

    id = Column(Integer, primary_key=True)
    from_profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    to_profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    from_profile = relationship("Profile", foreign_keys=[from_profile_id], back_populates="sent_interactions")
    to_profile = relationship("Profile", foreign_keys=[to_profile_id], back_populates="received_interactions")


class PostInteraction(Base):
    __tablename__ = "post_interactions"
    __table_args__ = (
        UniqueConstraint("post_id", "profile_id", "type", name="uq_post_interaction_edge"),
    )

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    post = relationship("Post", back_populates="interactions")


class ChatRequest(Base):
    __tablename__ = "chat_requests"
    __table_args__ = (
        UniqueConstraint("from_profile_id", "to_profile_id", name="uq_chat_request_pair"),
    )

    id = Column(Integer, primary_key=True)
    from_profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    to_profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), default="pending", nullable=False)
    message = Column(String(1000))
    created_at = Column(DateTime, default=utcnow)

    from_profile = relationship("Profile", foreign_keys=[from_profile_id])
    to_profile = relationship("Profile", foreign_keys=[to_profile_id])
