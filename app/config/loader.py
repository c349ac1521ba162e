"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import (
    Environment,
    ImageSettings,
    LandmarkApiSettings,
    LocationSettings,
    MapSettings,
    SandboxSettings,
    Settings,
)

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            env_file = str(env_file_path)
            # nested groups read their own prefixed keys from the same file
            return Settings(
                _env_file=env_file,
                environment=env,
                api=LandmarkApiSettings(_env_file=env_file),
                images=ImageSettings(_env_file=env_file),
                location=LocationSettings(_env_file=env_file),
                map=MapSettings(_env_file=env_file),
                sandbox=SandboxSettings(_env_file=env_file),
            )

        logger.warning(f"Environment file {env_file_path} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", "", 1))
        return sorted(env_files)

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """
        Validate that an environment configuration exists and loads.

        Args:
            environment: Environment name to validate

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            env = Environment(environment.lower())
            if not Path(f".env.{env.value}").exists():
                return False

            settings = ConfigLoader.load_environment_config(environment)
            return bool(settings.api.base_url) and settings.api.timeout_seconds > 0
        except ValueError:
            return False

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Logging Configuration
LOG_LEVEL={'DEBUG' if env == Environment.DEVELOPMENT else defaults.log_level.value}
LOG_FORMAT={'text' if env == Environment.DEVELOPMENT else 'json'}

# Remote API Configuration
LANDMARK_API_BASE_URL={defaults.api.base_url}
LANDMARK_API_ENDPOINT={defaults.api.endpoint}
LANDMARK_API_TIMEOUT_SECONDS={defaults.api.timeout_seconds}

# Image Upload Configuration
IMAGE_TARGET_WIDTH={defaults.images.target_width}
IMAGE_TARGET_HEIGHT={defaults.images.target_height}
IMAGE_JPEG_QUALITY={defaults.images.jpeg_quality}

# Location Configuration
LOCATION_TIMEOUT_SECONDS={defaults.location.timeout_seconds}

# Sandbox Server Configuration
SANDBOX_HOST={defaults.sandbox.host}
SANDBOX_PORT={defaults.sandbox.port}
SANDBOX_UPLOAD_DIR={defaults.sandbox.upload_dir}
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
