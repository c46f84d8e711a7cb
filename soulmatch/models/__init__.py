from .database import Base, Session, engine, init_db, utcnow
from .profile import Profile
from .interaction import Interaction, PostInteraction, ChatRequest
from .post import Post
from .banner import BannerMessage, BannerReply, SiteSetting

__all__ = [
    "Base",
    "Session",
    "engine",
    "init_db",
    "utcnow",
    "Profile",
    "Interaction",
    "PostInteraction",
    "ChatRequest",
    "Post",
    "BannerMessage",
    "BannerReply",
    "SiteSetting",
]
