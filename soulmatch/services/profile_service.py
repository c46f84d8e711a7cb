from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from soulmatch.models import (Profile, Post, Interaction, PostInteraction, ChatRequest,
                              BannerMessage, BannerReply, utcnow)
from soulmatch.models.types import parse_tag_list, parse_json_list, parse_string_map
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound, ValidationFailure
from soulmatch.services.compatibility import to_date, calculate_age
from soulmatch.services.interaction_service import InteractionService
from typing import Dict, List, Any
import logging

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "surname", "dob", "city"]

EDITABLE_FIELDS = [
    "name", "surname", "nickname", "email", "dob", "city", "province", "job", "description",
    "hobbies", "desires", "gender", "orientation", "body_type", "height_cm",
    "looking_for_gender", "looking_for_age_min", "looking_for_age_max", "looking_for_job",
    "looking_for_hobbies", "looking_for_city", "looking_for_height", "looking_for_body_type",
    "looking_for_other", "is_paid", "photo_url", "photos", "id_document_url", "getting_to_know",
]

LOOKING_FOR_KEYS = ["gender", "age_min", "age_max", "job", "hobbies", "city", "height", "body_type", "other"]


class ProfileService:
    @staticmethod
    def _flatten(profile_data: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in profile_data.items() if k != "looking_for"}
        looking_for = profile_data.get("looking_for") or {}
        for key in LOOKING_FOR_KEYS:
            if key in looking_for:
                data[f"looking_for_{key}"] = looking_for[key]
        return data

    @staticmethod
    def _normalize(data: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce loosely typed input and reject values outside the allowed vocabularies"""
        if "dob" in data:
            dob = to_date(data["dob"])
            if dob is None:
                raise ValidationFailure("Data di nascita non valida")
            data["dob"] = dob

        if data.get("gender") and data["gender"] not in config.GENDERS:
            raise ValidationFailure(f"Genere non valido: {data['gender']}")

        if "orientation" in data:
            data["orientation"] = parse_tag_list(data["orientation"])
            unknown = [o for o in data["orientation"] if o not in config.ORIENTATIONS]
            if unknown:
                raise ValidationFailure(f"Orientamento non valido: {', '.join(unknown)}")

        if "looking_for_gender" in data:
            data["looking_for_gender"] = parse_tag_list(data["looking_for_gender"])
            unknown = [g for g in data["looking_for_gender"] if g not in config.GENDERS + [config.EVERYONE]]
            if unknown:
                raise ValidationFailure(f"Genere cercato non valido: {', '.join(unknown)}")

        if "photos" in data:
            data["photos"] = parse_json_list(data["photos"])
            if len(data["photos"]) > config.PROFILE_MAX_PHOTOS:
                raise ValidationFailure(f"Massimo {config.PROFILE_MAX_PHOTOS} foto per profilo")

        if "getting_to_know" in data:
            data["getting_to_know"] = parse_string_map(data["getting_to_know"])
        return data

    @staticmethod
    def _check_age_range(profile: Profile):
        age_min, age_max = profile.looking_for_age_min, profile.looking_for_age_max
        if age_min is not None and age_max is not None and age_min > age_max:
            raise ValidationFailure("L'età minima cercata non può superare l'età massima")

    @staticmethod
    def create_profile(session: Session, profile_data: Dict[str, Any]) -> Profile:
        """Register a new profile"""
        data = ProfileService._flatten(profile_data)
        missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
        if missing:
            raise ValidationFailure(f"Campi obbligatori mancanti: {', '.join(missing)}")
        data = ProfileService._normalize(data)

        profile = Profile(**{k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None})
        if not profile.photo_url and profile.photos:
            profile.photo_url = profile.photos[0]
        ProfileService._check_age_range(profile)

        try:
            session.add(profile)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error creating profile {data.get('name')}: {e}")
            raise

        logger.info(f"Created profile {profile.id}")
        return profile

    @staticmethod
    def update_profile(session: Session, profile_id: int, profile_data: Dict[str, Any]) -> Profile:
        """Update an existing profile with the fields present in profile_data"""
        profile = ProfileService.get_profile_or_404(session, profile_id)
        data = ProfileService._normalize(ProfileService._flatten(profile_data))

        for field in REQUIRED_FIELDS:
            if field in data and not data[field]:
                raise ValidationFailure(f"Il campo {field} non può essere vuoto")

        try:
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(profile, field, data[field])
            ProfileService._check_age_range(profile)
            profile.updated_at = utcnow()
            session.commit()
        except ValidationFailure:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error updating profile {profile_id}: {e}")
            raise

        logger.info(f"Updated profile {profile_id}")
        return profile

    @staticmethod
    def get_profile_or_404(session: Session, profile_id: int) -> Profile:
        profile = session.get(Profile, profile_id)
        if profile is None:
            logger.debug(f"Profile {profile_id} not found")
            raise NotFound(f"Profilo {profile_id} non trovato")
        return profile

    @staticmethod
    def get_profile(session: Session, profile_id: int) -> Dict[str, Any]:
        """Get a profile with its live like/heart counts"""
        profile = ProfileService.get_profile_or_404(session, profile_id)
        return ProfileService.serialize(session, profile)

    @staticmethod
    def list_profiles(session: Session) -> List[Dict[str, Any]]:
        """Every profile, blocked and suspended included, for the admin console"""
        profiles = session.query(Profile).order_by(Profile.name).all()
        return [ProfileService.serialize(session, p) for p in profiles]

    @staticmethod
    def serialize(session: Session, profile: Profile) -> Dict[str, Any]:
        data = {
            "id": profile.id,
            "name": profile.name,
            "surname": profile.surname,
            "nickname": profile.nickname,
            "dob": profile.dob.isoformat() if profile.dob else None,
            "age": calculate_age(profile.dob),
            "city": profile.city,
            "province": profile.province,
            "job": profile.job,
            "description": profile.description,
            "hobbies": profile.hobbies,
            "desires": profile.desires,
            "gender": profile.gender,
            "orientation": list(profile.orientation or []),
            "body_type": profile.body_type,
            "height_cm": profile.height_cm,
            "looking_for": {
                key: getattr(profile, f"looking_for_{key}") for key in LOOKING_FOR_KEYS
            },
            "is_paid": bool(profile.is_paid),
            "is_online": bool(profile.is_online),
            "is_validated": bool(profile.is_validated),
            "is_blocked": bool(profile.is_blocked),
            "is_suspended": bool(profile.is_suspended),
            "photo_url": profile.photo_url,
            "photos": list(profile.photos or []),
            "id_document_url": profile.id_document_url,
            "getting_to_know": dict(profile.getting_to_know or {}),
            "created_at": profile.created_at.isoformat() if profile.created_at else None,
        }
        data.update(InteractionService.profile_counts(session, profile.id))
        return data

    @staticmethod
    def _set_flag(session: Session, profile_id: int, flag: str, value: bool) -> Profile:
        profile = ProfileService.get_profile_or_404(session, profile_id)
        try:
            setattr(profile, flag, value)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error setting {flag} on profile {profile_id}: {e}")
            raise
        logger.info(f"Set {flag}={value} on profile {profile_id}")
        return profile

    @staticmethod
    def set_online(session: Session, profile_id: int, online: bool = True) -> Profile:
        return ProfileService._set_flag(session, profile_id, "is_online", online)

    @staticmethod
    def validate_profile(session: Session, profile_id: int) -> Profile:
        """Mark the identity document as checked by an admin"""
        return ProfileService._set_flag(session, profile_id, "is_validated", True)

    @staticmethod
    def set_premium(session: Session, profile_id: int, paid: bool = True) -> Profile:
        return ProfileService._set_flag(session, profile_id, "is_paid", paid)

    @staticmethod
    def block_profile(session: Session, profile_id: int, blocked: bool = True) -> Profile:
        return ProfileService._set_flag(session, profile_id, "is_blocked", blocked)

    @staticmethod
    def suspend_profile(session: Session, profile_id: int, suspended: bool = True) -> Profile:
        return ProfileService._set_flag(session, profile_id, "is_suspended", suspended)

    @staticmethod
    def delete_profile(session: Session, profile_id: int) -> bool:
        """Delete a profile together with everything that references it"""
        ProfileService.get_profile_or_404(session, profile_id)
        try:
            post_ids = [row[0] for row in session.query(Post.id).filter_by(profile_id=profile_id).all()]
            banner_ids = [row[0] for row in session.query(BannerMessage.id).filter_by(profile_id=profile_id).all()]

            session.query(PostInteraction).filter(
                (PostInteraction.profile_id == profile_id) | (PostInteraction.post_id.in_(post_ids))
            ).delete(synchronize_session=False)
            session.query(Post).filter_by(profile_id=profile_id).delete(synchronize_session=False)
            session.query(Interaction).filter(
                (Interaction.from_profile_id == profile_id) | (Interaction.to_profile_id == profile_id)
            ).delete(synchronize_session=False)
            session.query(ChatRequest).filter(
                (ChatRequest.from_profile_id == profile_id) | (ChatRequest.to_profile_id == profile_id)
            ).delete(synchronize_session=False)
            session.query(BannerReply).filter(
                (BannerReply.from_profile_id == profile_id) | (BannerReply.banner_message_id.in_(banner_ids))
            ).delete(synchronize_session=False)
            session.query(BannerMessage).filter_by(profile_id=profile_id).delete(synchronize_session=False)
            session.query(Profile).filter_by(id=profile_id).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error deleting profile {profile_id}: {e}")
            raise

        session.expire_all()
        logger.info(f"Deleted profile {profile_id} and its interactions, requests and posts")
        return True
