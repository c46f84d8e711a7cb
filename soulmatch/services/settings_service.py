from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from soulmatch.models import SiteSetting
from soulmatch.core import config
from soulmatch.core.exceptions import NotFound
from soulmatch.core.redis_client import RedisClient
from typing import Any, Optional
import json
import logging

logger = logging.getLogger(__name__)

DEFAULTS = {
    config.HOME_SLIDER_KEY: config.DEFAULT_HOME_SLIDER,
}


class SettingsService:
    def __init__(self, redis_client: Optional[RedisClient] = None):
        if redis_client is None and config.REDIS_ENABLED:
            redis_client = RedisClient()
        self.redis_client = redis_client
        logger.info("Settings service initialized")

    def get_setting(self, session: Session, key: str) -> Any:
        """Read a setting, trying the cache first and seeding known defaults"""
        if self.redis_client:
            cached = self.redis_client.get_cached_setting(key)
            if cached is not None:
                return cached

        setting = session.get(SiteSetting, key)
        if setting is None:
            if key not in DEFAULTS:
                raise NotFound(f"Impostazione {key} non trovata")
            value = self.set_setting(session, key, DEFAULTS[key])
            logger.info(f"Seeded default setting {key}")
            return value

        try:
            value = json.loads(setting.value) if setting.value else None
        except ValueError:
            logger.warning(f"Setting {key} holds invalid JSON")
            value = None

        if self.redis_client and value is not None:
            self.redis_client.cache_setting(key, value)
        return value

    def set_setting(self, session: Session, key: str, value: Any) -> Any:
        try:
            setting = session.get(SiteSetting, key)
            if setting is None:
                setting = SiteSetting(key=key)
                session.add(setting)
            setting.value = json.dumps(value)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error saving setting {key}: {e}")
            raise

        if self.redis_client:
            self.redis_client.delete_setting(key)
        logger.info(f"Updated setting {key}")
        return value
