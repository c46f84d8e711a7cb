from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base, utcnow
from .types import JSONList


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        UniqueConstraint("profile_id", "post_date", name="uq_post_per_day"),
    )

    id = Column(Integer, primary_key=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    photos = Column(JSONList, default=list)
    description = Column(Text)
    post_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    author = relationship("Profile", back_populates="posts")
    interactions = relationship("PostInteraction", back_populates="post")
