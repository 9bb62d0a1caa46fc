from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "SkyBook API"
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS (e.g. https://skybook.example,https://admin.skybook.example). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    DATABASE_URL: str = "sqlite:///./skybook.db"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Bookings
    BOOKING_REFERENCE_ATTEMPTS: int = 10


settings = Settings()
