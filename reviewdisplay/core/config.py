from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./data/reviews.db"
    GOOGLE_PLACES_API_KEY: str | None = None
    GOOGLE_PLACES_API_URL: str = "https://maps.googleapis.com/maps/api/place/details/json"
    PLACES_REQUEST_TIMEOUT: float = 10.0
    REVIEW_CACHE_HOURS: int = 24
    REVIEW_RETENTION_DAYS: int = 7
    EMBED_CACHE_MAX_AGE: int = 300
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
