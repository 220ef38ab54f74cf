"""
Configuration module for filerouter.

Loads environment variables (and a local .env file) and validates settings.
"""
import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from filerouter.utils.logging import resolve_level

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Route modules bundled with the package
DEFAULT_ROUTES_DIR = Path(__file__).resolve().parent / "routes"

KNOWN_ENVIRONMENTS: List[str] = ["development", "testing", "staging", "production"]


class Settings:
    """Application settings loaded from environment variables."""

    # Server binding
    HOST: str = os.getenv("HOST", "localhost")
    PORT: str = os.getenv("PORT", "3000")

    # Route discovery root
    ROUTES_DIR: str = os.getenv("ROUTES_DIR", str(DEFAULT_ROUTES_DIR))

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def port(self) -> int:
        """PORT as an int; falls back to 3000 when unset or not numeric."""
        try:
            return int(self.PORT)
        except (TypeError, ValueError):
            return 3000

    @property
    def routes_dir(self) -> Path:
        return Path(self.ROUTES_DIR)

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging constant; INFO when the name is unknown."""
        try:
            return resolve_level(self.LOG_LEVEL)
        except ValueError:
            return logging.INFO

    def problems(self) -> List[str]:
        """Describe every invalid setting (empty list when all is well)."""
        found: List[str] = []

        if not self.PORT.isdigit() or not 0 < int(self.PORT) < 65536:
            found.append(f"PORT must be an integer between 1 and 65535, got {self.PORT!r}")

        try:
            resolve_level(self.LOG_LEVEL)
        except ValueError:
            found.append(f"LOG_LEVEL {self.LOG_LEVEL!r} is not a logging level")

        if not self.routes_dir.is_dir():
            found.append(f"ROUTES_DIR {self.ROUTES_DIR!r} is not a directory")

        if self.ENVIRONMENT.lower() not in KNOWN_ENVIRONMENTS:
            found.append(
                f"ENVIRONMENT {self.ENVIRONMENT!r} is not one of {', '.join(KNOWN_ENVIRONMENTS)}"
            )

        return found

    def validate(self) -> None:
        """
        Validate that all settings are usable.

        Raises:
            ValueError: If any setting is invalid.
        """
        found = self.problems()
        if found:
            raise ValueError(
                f"Invalid configuration: {'; '.join(found)}. "
                "Please check your environment or .env file."
            )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def is_staging(self) -> bool:
        """Check if running in staging environment."""
        return self.ENVIRONMENT.lower() == "staging"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            logger.warning(f"{e} The server may not start correctly until this is fixed.")
        else:
            # In production or staging, fail immediately
            raise
