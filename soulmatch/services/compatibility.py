"""Pure helpers for age and affinity scoring.

Profiles are read by attribute only, so ORM rows, pydantic schemas and
plain namespaces are all accepted.
"""
from datetime import date, datetime
from typing import Any, List, Optional
from soulmatch.core import config
from soulmatch.models.database import utcnow
from soulmatch.models.types import parse_tag_list


def to_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def calculate_age(dob: Any, today: Optional[date] = None) -> int:
    """Whole years between ``dob`` and ``today``; 0 when ``dob`` is missing or unparseable.

    ``today`` defaults to the current UTC date. Future birth dates are not
    special-cased and yield zero or a negative number.
    """
    birth_date = to_date(dob)
    if birth_date is None:
        return 0
    today = today or utcnow().date()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def hobby_tokens(hobbies: Optional[str]) -> List[str]:
    return [h.strip() for h in (hobbies or "").lower().split(",") if h.strip()]


def match_score(viewer: Any, candidate: Any, today: Optional[date] = None) -> int:
    """Affinity percentage in [MATCH_MIN_SCORE, MATCH_MAX_SCORE], or 0 if either side is absent"""
    if viewer is None or candidate is None:
        return 0

    score = config.MATCH_BASE_SCORE

    viewer_hobbies = hobby_tokens(getattr(viewer, "hobbies", None))
    candidate_hobbies = hobby_tokens(getattr(candidate, "hobbies", None))
    shared = [h for h in viewer_hobbies if h in candidate_hobbies]
    score += len(shared) * config.MATCH_HOBBY_POINTS

    viewer_city = getattr(viewer, "city", None)
    candidate_city = getattr(candidate, "city", None)
    if viewer_city and candidate_city and viewer_city.lower() == candidate_city.lower():
        score += config.MATCH_CITY_POINTS

    age_diff = abs(calculate_age(getattr(viewer, "dob", None), today)
                   - calculate_age(getattr(candidate, "dob", None), today))
    if age_diff <= config.MATCH_AGE_CLOSE_YEARS:
        score += config.MATCH_AGE_CLOSE_POINTS
    elif age_diff <= config.MATCH_AGE_NEAR_YEARS:
        score += config.MATCH_AGE_NEAR_POINTS

    if parse_tag_list(getattr(viewer, "orientation", None)) == parse_tag_list(getattr(candidate, "orientation", None)):
        score += config.MATCH_ORIENTATION_POINTS

    return min(max(score, config.MATCH_MIN_SCORE), config.MATCH_MAX_SCORE)
