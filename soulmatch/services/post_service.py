from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from soulmatch.models import Profile, Post, PostInteraction, utcnow
from soulmatch.models.types import parse_json_list
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound, RateLimited, ValidationFailure
from soulmatch.services.interaction_service import InteractionService
from datetime import datetime
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)

DAILY_LIMIT_MESSAGE = "Puoi pubblicare solo un post al giorno."


class PostService:
    @staticmethod
    def can_post(session: Session, profile_id: int, now: Optional[datetime] = None) -> bool:
        """False when the latest post shares the UTC calendar date of ``now``"""
        now = now or utcnow()
        last_post = session.query(Post).filter_by(profile_id=profile_id).order_by(
            Post.created_at.desc()
        ).first()
        if last_post is None:
            return True
        return last_post.created_at.date() != now.date()

    @staticmethod
    def create_post(session: Session, profile_id: int, photos: Optional[List[str]], description: Optional[str],
                    now: Optional[datetime] = None) -> Post:
        """Publish a feed post, at most one per profile per UTC day"""
        now = now or utcnow()
        photos = parse_json_list(photos)
        if len(photos) > config.POST_MAX_PHOTOS:
            raise ValidationFailure(f"Massimo {config.POST_MAX_PHOTOS} foto per post")
        if session.get(Profile, profile_id) is None:
            raise NotFound(f"Profilo {profile_id} non trovato")
        if not PostService.can_post(session, profile_id, now):
            raise RateLimited(DAILY_LIMIT_MESSAGE)

        post = Post(
            profile_id=profile_id,
            photos=photos,
            description=description,
            created_at=now,
            post_date=now.date()
        )
        try:
            session.add(post)
            session.commit()
        except IntegrityError:
            # the (profile_id, post_date) constraint caught a concurrent post
            session.rollback()
            raise RateLimited(DAILY_LIMIT_MESSAGE)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error creating post for profile {profile_id}: {e}")
            raise

        logger.info(f"Profile {profile_id} published post {post.id}")
        return post

    @staticmethod
    def serialize(session: Session, post: Post, caller_id: Optional[int] = None) -> Dict[str, Any]:
        kinds = InteractionService.list_post_interaction_kinds(session, caller_id, post.id) if caller_id else set()
        data = {
            "id": post.id,
            "profile_id": post.profile_id,
            "author_name": post.author.name if post.author else None,
            "author_photo": post.author.photo_url if post.author else None,
            "photos": list(post.photos or []),
            "description": post.description,
            "created_at": post.created_at.isoformat(),
            "has_liked": "like" in kinds,
            "has_hearted": "heart" in kinds,
        }
        data.update(InteractionService.post_counts(session, post.id))
        return data

    @staticmethod
    def list_posts(session: Session, caller_id: Optional[int] = None,
                   author_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Feed posts, newest first, optionally restricted to one author"""
        query = session.query(Post)
        if author_id is not None:
            if session.get(Profile, author_id) is None:
                raise NotFound(f"Profilo {author_id} non trovato")
            query = query.filter(Post.profile_id == author_id)
        posts = query.order_by(Post.created_at.desc(), Post.id.desc()).all()
        logger.debug(f"Listing {len(posts)} posts (author={author_id}, caller={caller_id})")
        return [PostService.serialize(session, post, caller_id) for post in posts]

    @staticmethod
    def get_post(session: Session, post_id: int, caller_id: Optional[int] = None) -> Dict[str, Any]:
        post = session.get(Post, post_id)
        if post is None:
            raise NotFound(f"Post {post_id} non trovato")
        return PostService.serialize(session, post, caller_id)

    @staticmethod
    def delete_post(session: Session, post_id: int) -> bool:
        if session.get(Post, post_id) is None:
            raise NotFound(f"Post {post_id} non trovato")
        try:
            session.query(PostInteraction).filter_by(post_id=post_id).delete(synchronize_session=False)
            session.query(Post).filter_by(id=post_id).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error deleting post {post_id}: {e}")
            raise
        session.expire_all()
        logger.info(f"Deleted post {post_id}")
        return True
