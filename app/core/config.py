"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, gateway URL, upload limits)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """
    
    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    
    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="hudhud",
        description="MongoDB database name"
    )
    
    # SMS Gateway (Hudhud)
    SMS_GATEWAY_URL: str = Field(
        default="https://www.hloov.com/api/sms/send",
        description="Bulk send endpoint of the SMS gateway"
    )
    SMS_GATEWAY_TIMEOUT: float = Field(
        default=60.0,
        description="Gateway request timeout in seconds"
    )
    
    # Uploads
    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        description="Maximum accepted spreadsheet size in megabytes"
    )
    PREVIEW_LIMIT: int = Field(
        default=50,
        description="Default number of contacts returned by the preview endpoint"
    )
    
    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    
    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Application secret key"
    )
    
    @validator("SECRET_KEY")
    def validate_secret_key(cls, v, values):
        """Ensure secret key is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v
    
    @validator("SMS_GATEWAY_TIMEOUT")
    def validate_gateway_timeout(cls, v):
        if v <= 0:
            raise ValueError("SMS_GATEWAY_TIMEOUT must be positive")
        return v
    
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"
    
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"
    
    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []
    
    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")
    
    if not settings.SMS_GATEWAY_URL:
        errors.append("SMS_GATEWAY_URL is required")
    elif settings.is_production and not settings.SMS_GATEWAY_URL.startswith("https://"):
        errors.append("SMS_GATEWAY_URL must use https in production")
    
    if settings.MAX_UPLOAD_SIZE_MB <= 0:
        errors.append("MAX_UPLOAD_SIZE_MB must be positive")
    
    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")
    
    return True
