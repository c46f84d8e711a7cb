from sqlalchemy.orm import Session
from soulmatch.models import Profile
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound
from soulmatch.models.types import parse_tag_list
from soulmatch.services.compatibility import calculate_age, match_score
from soulmatch.services.profile_service import ProfileService
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


def _is_opposite_pair(gender_a: Optional[str], gender_b: Optional[str]) -> bool:
    return {gender_a, gender_b} == {config.GENDER_MALE, config.GENDER_FEMALE}


def wants(seeker: Any, other: Any) -> bool:
    """Whether ``seeker``'s declared orientation and preference admit ``other``.

    Only heterosexual, gay and lesbian orientations narrow by gender; any other
    orientation wants everyone unless an explicit preferred gender narrows it.
    """
    seeker_gender = getattr(seeker, "gender", None)
    other_gender = getattr(other, "gender", None)
    orientations = parse_tag_list(getattr(seeker, "orientation", None))

    if config.ORIENTATION_HETEROSEXUAL in orientations and not _is_opposite_pair(seeker_gender, other_gender):
        return False
    if config.ORIENTATION_GAY in orientations and (
            seeker_gender != config.GENDER_MALE or other_gender != config.GENDER_MALE):
        return False
    if config.ORIENTATION_LESBIAN in orientations and (
            seeker_gender != config.GENDER_FEMALE or other_gender != config.GENDER_FEMALE):
        return False

    preferred = parse_tag_list(getattr(seeker, "looking_for_gender", None))
    if preferred and config.EVERYONE not in preferred and other_gender not in preferred:
        return False
    return True


def is_reciprocal_match(viewer: Any, candidate: Any) -> bool:
    if getattr(viewer, "id", None) is not None and getattr(viewer, "id", None) == getattr(candidate, "id", None):
        return False
    return wants(candidate, viewer) and wants(viewer, candidate)


def reciprocal_filter(viewer: Any, candidates: Iterable[Any]) -> List[Any]:
    """Keep candidates with mutual interest; an anonymous viewer sees everyone"""
    candidates = list(candidates)
    if viewer is None:
        return candidates
    return [c for c in candidates if is_reciprocal_match(viewer, c)]


def _is_set(value: Any) -> bool:
    return value not in (None, "", config.EVERYONE)


def matches_filters(profile: Any, filters: Dict[str, Any]) -> bool:
    """Basic directory filters applied before the reciprocal check"""
    gender = filters.get("gender")
    if _is_set(gender) and getattr(profile, "gender", None) != gender:
        return False

    orientation = filters.get("orientation")
    if _is_set(orientation) and orientation not in parse_tag_list(getattr(profile, "orientation", None)):
        return False

    city = filters.get("city")
    if _is_set(city) and (getattr(profile, "city", None) or "").lower() != city.lower():
        return False

    body_type = filters.get("body_type")
    if _is_set(body_type) and getattr(profile, "body_type", None) != body_type:
        return False

    age_min = filters.get("age_min")
    age_max = filters.get("age_max")
    if age_min is not None or age_max is not None:
        age = calculate_age(getattr(profile, "dob", None))
        if age_min is not None and age < age_min:
            return False
        if age_max is not None and age > age_max:
            return False
    return True


class MatchingService:
    @staticmethod
    def browse_profiles(session: Session, viewer_id: Optional[int] = None,
                        filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Directory listing: attribute filters, then mutual interest when a viewer is known"""
        filters = filters or {}
        viewer = None
        if viewer_id is not None:
            viewer = session.get(Profile, viewer_id)
            if viewer is None:
                raise NotFound(f"Profilo {viewer_id} non trovato")

        candidates = session.query(Profile).filter(
            Profile.is_blocked == False,
            Profile.is_suspended == False
        ).order_by(Profile.id).all()

        candidates = [p for p in candidates if matches_filters(p, filters)]
        candidates = reciprocal_filter(viewer, candidates)

        result = []
        for profile in candidates:
            data = ProfileService.serialize(session, profile)
            data["match_score"] = match_score(viewer, profile) if viewer else None
            result.append(data)

        logger.debug(f"Browse for viewer {viewer_id} returned {len(result)} profiles")
        return result

    @staticmethod
    def compatibility(session: Session, viewer_id: int, candidate_id: int) -> Dict[str, Any]:
        viewer = session.get(Profile, viewer_id)
        candidate = session.get(Profile, candidate_id)
        if viewer is None:
            raise NotFound(f"Profilo {viewer_id} non trovato")
        if candidate is None:
            raise NotFound(f"Profilo {candidate_id} non trovato")
        return {
            "viewer_id": viewer_id,
            "candidate_id": candidate_id,
            "score": match_score(viewer, candidate),
            "mutual": is_reciprocal_match(viewer, candidate),
        }
