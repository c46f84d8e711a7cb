import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///soulmatch.db")

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = os.getenv("REDIS_PORT", "6379")
REDIS_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}/0"
REDIS_CACHE_TTL = int(os.getenv("REDIS_CACHE_TTL", "3600"))
REDIS_ENABLED = os.getenv("REDIS_ENABLED", "True").lower() == "true"

ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "change-me")

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "soulmatch.log")

GENDER_MALE = "Uomo"
GENDER_FEMALE = "Donna"
GENDERS = [GENDER_MALE, GENDER_FEMALE, "Non-binario", "Transgender", "Genderfluid", "Queer", "Altro"]

ORIENTATION_HETEROSEXUAL = "Eterosessuale"
ORIENTATION_GAY = "Gay"
ORIENTATION_LESBIAN = "Lesbica"
ORIENTATIONS = [ORIENTATION_HETEROSEXUAL, ORIENTATION_GAY, ORIENTATION_LESBIAN,
                "Bisessuale", "Pansessuale", "Queer", "Altro"]

EVERYONE = "Tutti"

INTERACTION_TYPES = ("like", "heart")

MATCH_BASE_SCORE = 40
MATCH_HOBBY_POINTS = 12
MATCH_CITY_POINTS = 15
MATCH_AGE_CLOSE_YEARS = 3
MATCH_AGE_CLOSE_POINTS = 10
MATCH_AGE_NEAR_YEARS = 7
MATCH_AGE_NEAR_POINTS = 5
MATCH_ORIENTATION_POINTS = 5
MATCH_MIN_SCORE = 20
MATCH_MAX_SCORE = 99

PROFILE_MAX_PHOTOS = 5
POST_MAX_PHOTOS = 3

BANNER_TTL_HOURS = 24

HOME_SLIDER_KEY = "home_slider"
DEFAULT_HOME_SLIDER = [
    "https://images.unsplash.com/photo-1529156069898-49953e39b3ac?q=80&w=2000&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1491438590914-bc09fcaaf77a?q=80&w=2000&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1517486808906-6ca8b3f04846?q=80&w=2000&auto=format&fit=crop",
]
