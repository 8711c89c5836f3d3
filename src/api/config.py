"""
API configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Deadlock asset API
    DEADLOCK_API_BASE: str = "https://assets.deadlock-api.com"
    HEROES_PATH: str = "/v2/heroes"
    ITEMS_PATH: str = "/v2/items"
    API_REVALIDATE_SECONDS: int = 60
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Page-view counter
    COUNTER_API_BASE: str = "https://api.counterapi.dev/v1"
    COUNTERAPI_NAMESPACE: str = "deadlocknumbers"
    COUNTERAPI_COUNTER: str = "home"

    # Calculator defaults
    DEFAULT_ENEMY_HEALTH: float = 3000
    DEFAULT_COMBAT_WINDOW: float = 10
    DEFAULT_SPIRIT: float = 120

    class Config:
        env_file = ".env"


settings = Settings()
