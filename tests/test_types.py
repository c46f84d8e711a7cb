import pytest
from sqlalchemy import text
from soulmatch.models import Profile
from soulmatch.models.types import parse_tag_list, parse_json_list, parse_string_map


class TestParsers:

    @pytest.mark.parametrize("raw, expected", [
        (None, []),
        ("", []),
        ("   ", []),
        ("Eterosessuale", ["Eterosessuale"]),
        ('["Gay", "Bisessuale"]', ["Gay", "Bisessuale"]),
        ('[broken', ["[broken"]),
        ('["Gay", null, " "]', ["Gay"]),
        (["Donna", "Uomo"], ["Donna", "Uomo"]),
        (42, ["42"]),
    ])
    def test_parse_tag_list(self, raw, expected):
        assert parse_tag_list(raw) == expected

    def test_parse_json_list(self):
        assert parse_json_list('["a.jpg", "b.jpg"]') == ["a.jpg", "b.jpg"]
        assert parse_json_list("not json") == []
        assert parse_json_list('{"a": 1}') == []
        assert parse_json_list(None) == []

    def test_parse_string_map(self):
        assert parse_string_map('{"film": "Matrix", "anni": 3}') == {"film": "Matrix", "anni": "3"}
        assert parse_string_map("{oops") == {}
        assert parse_string_map('["a"]') == {}
        assert parse_string_map(None) == {}


class TestStorageBoundary:

    def test_bare_string_rows_read_back_as_lists(self, test_session, make_profile):
        profile = make_profile(gender="Uomo")
        test_session.execute(
            text("UPDATE profiles SET orientation = 'Gay', looking_for_gender = '[\"Uomo\"]', "
                 "photos = 'garbage', getting_to_know = '{bad' WHERE id = :id"),
            {"id": profile.id}
        )
        test_session.commit()
        test_session.expire_all()

        reloaded = test_session.get(Profile, profile.id)
        assert reloaded.orientation == ["Gay"]
        assert reloaded.looking_for_gender == ["Uomo"]
        assert reloaded.photos == []
        assert reloaded.getting_to_know == {}

    def test_lists_are_written_as_json(self, test_session, make_profile):
        profile = make_profile(orientation=["Bisessuale", "Queer"])
        raw = test_session.execute(
            text("SELECT orientation FROM profiles WHERE id = :id"), {"id": profile.id}
        ).scalar()
        assert raw == '["Bisessuale", "Queer"]'
