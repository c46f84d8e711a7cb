from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from soulmatch.models import Profile, BannerMessage, BannerReply, utcnow
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound, ValidationFailure
from soulmatch.services.compatibility import calculate_age
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class BannerService:
    """Public message board. Messages live for BANNER_TTL_HOURS, expiry is applied on read."""

    @staticmethod
    def _cutoff(now: Optional[datetime]) -> datetime:
        return (now or utcnow()) - timedelta(hours=config.BANNER_TTL_HOURS)

    @staticmethod
    def _delete_messages(session: Session, message_ids: List[int]):
        if not message_ids:
            return
        session.query(BannerReply).filter(
            BannerReply.banner_message_id.in_(message_ids)
        ).delete(synchronize_session=False)
        session.query(BannerMessage).filter(
            BannerMessage.id.in_(message_ids)
        ).delete(synchronize_session=False)

    @staticmethod
    def post_message(session: Session, profile_id: int, message: str,
                     now: Optional[datetime] = None) -> BannerMessage:
        """Publish a message, replacing the author's previous one"""
        if not message or not message.strip():
            raise ValidationFailure("Il messaggio non può essere vuoto")
        if session.get(Profile, profile_id) is None:
            raise NotFound(f"Profilo {profile_id} non trovato")

        try:
            previous = [row[0] for row in session.query(BannerMessage.id).filter_by(profile_id=profile_id).all()]
            BannerService._delete_messages(session, previous)
            banner = BannerMessage(profile_id=profile_id, message=message.strip(), created_at=now or utcnow())
            session.add(banner)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error posting banner message for profile {profile_id}: {e}")
            raise

        logger.info(f"Profile {profile_id} posted banner message {banner.id}")
        return banner

    @staticmethod
    def purge_expired(session: Session, now: Optional[datetime] = None) -> int:
        expired = [row[0] for row in session.query(BannerMessage.id).filter(
            BannerMessage.created_at < BannerService._cutoff(now)
        ).all()]
        if not expired:
            return 0
        try:
            BannerService._delete_messages(session, expired)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error purging expired banner messages: {e}")
            raise
        logger.info(f"Purged {len(expired)} expired banner messages")
        return len(expired)

    @staticmethod
    def list_active(session: Session, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        BannerService.purge_expired(session, now)
        rows = session.query(BannerMessage, Profile).join(
            Profile, BannerMessage.profile_id == Profile.id
        ).order_by(BannerMessage.created_at.desc()).all()
        return [
            {
                "id": banner.id,
                "profile_id": banner.profile_id,
                "message": banner.message,
                "created_at": banner.created_at.isoformat(),
                "name": author.name,
                "surname": author.surname,
                "photo_url": author.photo_url,
                "age": calculate_age(author.dob),
                "city": author.city,
            }
            for banner, author in rows
        ]

    @staticmethod
    def delete_message(session: Session, banner_id: int) -> bool:
        if session.get(BannerMessage, banner_id) is None:
            raise NotFound(f"Messaggio {banner_id} non trovato")
        try:
            BannerService._delete_messages(session, [banner_id])
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error deleting banner message {banner_id}: {e}")
            raise
        session.expire_all()
        return True

    @staticmethod
    def reply(session: Session, banner_id: int, from_profile_id: int, reply_text: str) -> BannerReply:
        if not reply_text or not reply_text.strip():
            raise ValidationFailure("La risposta non può essere vuota")
        if session.get(BannerMessage, banner_id) is None:
            raise NotFound(f"Messaggio {banner_id} non trovato")
        if session.get(Profile, from_profile_id) is None:
            raise NotFound(f"Profilo {from_profile_id} non trovato")

        reply = BannerReply(banner_message_id=banner_id, from_profile_id=from_profile_id,
                            reply_text=reply_text.strip())
        try:
            session.add(reply)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error replying to banner message {banner_id}: {e}")
            raise
        logger.debug(f"Profile {from_profile_id} replied to banner message {banner_id}")
        return reply

    @staticmethod
    def get_profile_banner(session: Session, profile_id: int,
                           now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """The profile's active message with its replies, or None"""
        if session.get(Profile, profile_id) is None:
            raise NotFound(f"Profilo {profile_id} non trovato")
        banner = session.query(BannerMessage).filter(
            BannerMessage.profile_id == profile_id,
            BannerMessage.created_at >= BannerService._cutoff(now)
        ).order_by(BannerMessage.created_at.desc()).first()
        if banner is None:
            return None

        rows = session.query(BannerReply, Profile).join(
            Profile, BannerReply.from_profile_id == Profile.id
        ).filter(
            BannerReply.banner_message_id == banner.id
        ).order_by(BannerReply.created_at.desc()).all()

        return {
            "message": {
                "id": banner.id,
                "message": banner.message,
                "created_at": banner.created_at.isoformat(),
            },
            "replies": [
                {
                    "id": reply.id,
                    "from_profile_id": reply.from_profile_id,
                    "reply_text": reply.reply_text,
                    "created_at": reply.created_at.isoformat(),
                    "name": author.name,
                    "photo_url": author.photo_url,
                }
                for reply, author in rows
            ],
        }
