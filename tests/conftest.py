import pytest
import tempfile
import os
from sqlalchemy.orm import sessionmaker
from soulmatch.models.database import Base, make_engine
from soulmatch.services.profile_service import ProfileService


@pytest.fixture
def test_db_engine():
    temp_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
    temp_db.close()

    test_db_url = f"sqlite:///{temp_db.name}"
    engine = make_engine(test_db_url)

    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()
    os.unlink(temp_db.name)


@pytest.fixture
def test_session(test_db_engine):
    Session = sessionmaker(bind=test_db_engine)
    session = Session()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def sample_profile_data():
    return {
        "name": "Marco",
        "surname": "Rossi",
        "dob": "1990-01-01",
        "city": "Roma",
        "job": "Ingegnere",
        "description": "Amo il cinema e lo sport",
        "hobbies": "calcio, cinema",
        "gender": "Uomo",
        "orientation": ["Eterosessuale"],
        "looking_for": {
            "gender": ["Donna"],
            "age_min": 25,
            "age_max": 40,
        },
        "photos": ["https://example.com/marco1.jpg", "https://example.com/marco2.jpg"],
    }


@pytest.fixture
def second_profile_data():
    return {
        "name": "Giulia",
        "surname": "Bianchi",
        "dob": "1992-06-15",
        "city": "Roma",
        "hobbies": "cinema, lettura",
        "gender": "Donna",
        "orientation": ["Eterosessuale"],
        "looking_for": {"gender": ["Uomo"]},
    }


@pytest.fixture
def make_profile(test_session):
    counter = {"n": 0}

    def _make_profile(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Utente{counter['n']}",
            "surname": "Test",
            "dob": "1991-03-10",
            "city": "Milano",
        }
        data.update(overrides)
        return ProfileService.create_profile(test_session, data)

    return _make_profile


class FakeRedisClient:
    """In-memory stand-in for RedisClient used by the settings tests"""

    def __init__(self):
        self.store = {}

    def cache_setting(self, key, value, ttl=None):
        self.store[key] = value
        return True

    def get_cached_setting(self, key):
        return self.store.get(key)

    def delete_setting(self, key):
        self.store.pop(key, None)
        return True


@pytest.fixture
def fake_redis():
    return FakeRedisClient()
