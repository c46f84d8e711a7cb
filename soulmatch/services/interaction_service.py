from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import func
from soulmatch.models import Profile, Post, Interaction, PostInteraction
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound, ValidationFailure
from typing import Dict, Set, Any
import logging

logger = logging.getLogger(__name__)


def _check_kind(kind: str):
    if kind not in config.INTERACTION_TYPES:
        raise ValidationFailure(f"Tipo di interazione non valido: {kind}")


def _toggle_edge(session: Session, model, **edge) -> bool:
    """Insert the edge, or delete it if it already exists. Returns True when it was deleted."""
    try:
        existing = session.query(model).filter_by(**edge).with_for_update().first()
        if existing is not None:
            session.delete(existing)
            session.commit()
            return True

        session.add(model(**edge))
        session.commit()
        return False
    except IntegrityError:
        # a concurrent identical request inserted the edge between our read and write
        session.rollback()
        try:
            deleted = session.query(model).filter_by(**edge).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        logger.warning(f"Resolved concurrent {model.__tablename__} insert for {edge} as a toggle")
        return deleted > 0
    except SQLAlchemyError:
        session.rollback()
        raise


class InteractionService:
    @staticmethod
    def record_interaction(session: Session, actor_id: int, target_id: int, kind: str) -> Dict[str, Any]:
        """Toggle a like/heart edge from one profile to another"""
        _check_kind(kind)
        for profile_id in (actor_id, target_id):
            if session.get(Profile, profile_id) is None:
                raise NotFound(f"Profilo {profile_id} non trovato")

        toggled = _toggle_edge(session, Interaction, from_profile_id=actor_id, to_profile_id=target_id, type=kind)
        if toggled:
            logger.info(f"Profile {actor_id} removed {kind} from profile {target_id}")
        else:
            logger.info(f"Profile {actor_id} sent {kind} to profile {target_id}")
        return {"success": True, "toggled": toggled}

    @staticmethod
    def count_interactions(session: Session, target_id: int, kind: str) -> int:
        return session.query(func.count(Interaction.id)).filter(
            Interaction.to_profile_id == target_id,
            Interaction.type == kind
        ).scalar() or 0

    @staticmethod
    def list_interaction_kinds(session: Session, actor_id: int, target_id: int) -> Set[str]:
        rows = session.query(Interaction.type).filter_by(
            from_profile_id=actor_id,
            to_profile_id=target_id
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def profile_counts(session: Session, target_id: int) -> Dict[str, int]:
        return {
            "likes_count": InteractionService.count_interactions(session, target_id, "like"),
            "hearts_count": InteractionService.count_interactions(session, target_id, "heart"),
        }

    @staticmethod
    def record_post_interaction(session: Session, actor_id: int, post_id: int, kind: str) -> Dict[str, Any]:
        """Toggle a like/heart edge from a profile to a post"""
        _check_kind(kind)
        if session.get(Profile, actor_id) is None:
            raise NotFound(f"Profilo {actor_id} non trovato")
        if session.get(Post, post_id) is None:
            raise NotFound(f"Post {post_id} non trovato")

        toggled = _toggle_edge(session, PostInteraction, post_id=post_id, profile_id=actor_id, type=kind)
        logger.info(f"Profile {actor_id} {'removed' if toggled else 'sent'} {kind} on post {post_id}")
        return {"success": True, "toggled": toggled}

    @staticmethod
    def count_post_interactions(session: Session, post_id: int, kind: str) -> int:
        return session.query(func.count(PostInteraction.id)).filter(
            PostInteraction.post_id == post_id,
            PostInteraction.type == kind
        ).scalar() or 0

    @staticmethod
    def list_post_interaction_kinds(session: Session, actor_id: int, post_id: int) -> Set[str]:
        rows = session.query(PostInteraction.type).filter_by(
            profile_id=actor_id,
            post_id=post_id
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def post_counts(session: Session, post_id: int) -> Dict[str, int]:
        return {
            "likes_count": InteractionService.count_post_interactions(session, post_id, "like"),
            "hearts_count": InteractionService.count_post_interactions(session, post_id, "heart"),
        }
