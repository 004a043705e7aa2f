"""
Application configuration
Read from environment variables / .env
"""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Hotel Booking Engine"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./hotel_booking.db"

    # Caller tokens (issued by the external identity provider)
    SECRET_KEY: str = "hotel-booking-secret-change-in-production"
    ALGORITHM: str = "HS256"

    # Booking policy
    ENFORCE_STATUS_TRANSITIONS: bool = False

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
