"""Column types that normalise loosely typed JSON fields at the storage boundary.

Older rows store orientation and looking-for gender either as a bare string
(``"Eterosessuale"``) or as a JSON array (``'["Gay", "Bisessuale"]'``). The
parsers below accept every shape seen in the wild and never raise: anything
unusable collapses to an empty container or a single wrapped value.
"""
import json
from typing import Any, Dict, List
from sqlalchemy.types import Text, TypeDecorator


def parse_tag_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    text = str(value).strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            return parse_tag_list(decoded)
    return [text]


def parse_json_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    if isinstance(value, str) and value.strip():
        try:
            decoded = json.loads(value)
        except ValueError:
            return []
        if isinstance(decoded, list):
            return [str(v) for v in decoded if v is not None]
    return []


def parse_string_map(value: Any) -> Dict[str, str]:
    if isinstance(value, str) and value.strip():
        try:
            value = json.loads(value)
        except ValueError:
            return {}
    if isinstance(value, dict):
        return {str(k): "" if v is None else str(v) for k, v in value.items()}
    return {}


class _JSONText(TypeDecorator):
    impl = Text
    cache_ok = True

    parser = staticmethod(parse_json_list)

    def process_bind_param(self, value, dialect):
        return json.dumps(self.parser(value))

    def process_result_value(self, value, dialect):
        return self.parser(value)


class TagList(_JSONText):
    """Ordered list of string tags"""

    parser = staticmethod(parse_tag_list)


class JSONList(_JSONText):
    parser = staticmethod(parse_json_list)


class StringMap(_JSONText):
    """Open string to string mapping"""

    parser = staticmethod(parse_string_map)
