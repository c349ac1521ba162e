"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Tuple
from enum import Enum
from pathlib import Path
import tempfile


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LandmarkApiSettings(BaseSettings):
    """Remote landmark endpoint configuration"""

    base_url: str = Field(
        default="https://labs.anontech.info/cse489/t3/",
        description="Base URL the api.php endpoint lives under"
    )
    endpoint: str = Field(default="api.php")
    timeout_seconds: float = Field(default=15.0, ge=1.0, le=120.0)
    connect_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    user_agent: str = Field(default="LandmarkBangladesh-Client/1.0")
    fallback_title: str = Field(default="Unknown Landmark")

    @field_validator('base_url', mode='after')
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Relative joins only work against a directory-style base URL"""
        return v if v.endswith("/") else v + "/"

    model_config = {"env_prefix": "LANDMARK_API_", "env_file": ".env", "extra": "ignore"}


class ImageSettings(BaseSettings):
    """Upload image preparation configuration"""

    target_width: int = Field(default=800, ge=16, le=4096)
    target_height: int = Field(default=600, ge=16, le=4096)
    jpeg_quality: int = Field(default=85, ge=10, le=100)
    temp_dir: str = Field(
        default_factory=lambda: str(Path(tempfile.gettempdir()) / "landmark-uploads")
    )
    default_mime_type: str = Field(default="image/jpeg")
    cleanup_after_upload: bool = Field(default=True)

    model_config = {"env_prefix": "IMAGE_", "env_file": ".env", "extra": "ignore"}


class LocationSettings(BaseSettings):
    """Device location lookup configuration"""

    timeout_seconds: float = Field(default=10.0, ge=1.0, le=120.0)
    max_fix_age_seconds: float = Field(default=120.0, ge=0.0, le=3600.0)

    model_config = {"env_prefix": "LOCATION_", "env_file": ".env", "extra": "ignore"}


class MapSettings(BaseSettings):
    """Default map view, centered on Bangladesh"""

    center_latitude: float = Field(default=23.6850, ge=-90.0, le=90.0)
    center_longitude: float = Field(default=90.3563, ge=-180.0, le=180.0)
    default_zoom: float = Field(default=7.0, ge=1.0, le=20.0)
    min_zoom: float = Field(default=5.0, ge=1.0, le=20.0)
    max_zoom: float = Field(default=18.0, ge=1.0, le=20.0)

    @property
    def center(self) -> Tuple[float, float]:
        return self.center_latitude, self.center_longitude

    model_config = {"env_prefix": "MAP_", "env_file": ".env", "extra": "ignore"}


class SandboxSettings(BaseSettings):
    """Local stand-in for the api.php server"""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    upload_dir: str = Field(default="uploads")
    seed_sample_data: bool = Field(default=False)

    model_config = {"env_prefix": "SANDBOX_", "env_file": ".env", "extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Landmark Bangladesh")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", description="json or text")
    log_file: Optional[str] = Field(default=None)

    # Nested Settings
    api: LandmarkApiSettings = Field(default_factory=LandmarkApiSettings)
    images: ImageSettings = Field(default_factory=ImageSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    sandbox: SandboxSettings = Field(default_factory=SandboxSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        if isinstance(v, str) and v.lower() in ("json", "text"):
            return v.lower()
        raise ValueError("log_format must be 'json' or 'text'")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
