"""
Configuration management for Recipe Book.

This module centralizes environment variable loading from the .env file at the
project root. It is imported early by the Streamlit entry point so that .env is
loaded before any other code reads environment variables.

In production .env will not exist; load_dotenv() is safe to call and will no-op,
and the platform environment variables are used instead.

Environment Variables:
- RECIPEBOOK_BACKEND: Optional, "rest" or "local" (defaults to "rest" when PLATFORM_URL is set)
- PLATFORM_URL: Required for the hosted backend (e.g. https://xyz.example.co)
- PLATFORM_ANON_KEY: Required for the hosted backend (public API key)
- PLATFORM_REQUEST_TIMEOUT: Optional, seconds; unset means no local timeout
- LOCAL_DATABASE_URL: Optional, defaults to "sqlite:///recipebook.db"
- LOCAL_PUBLIC_URL: Optional, prefix for public object URLs of the local backend
- RECIPE_IMAGES_BUCKET: Optional, defaults to "recipe-images"
- LOG_LEVEL: Optional, defaults to "INFO"
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BACKEND_REST = "rest"
BACKEND_LOCAL = "local"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence
    over values from the file.
    """
    # recipebook/config.py -> recipebook/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


load_env_file()


class PlatformConfig:
    """Configuration for the backend platform (hosted or local)."""

    @staticmethod
    def get_url() -> Optional[str]:
        """
        Get the hosted platform base URL.

        Returns:
            URL string with trailing slash removed, or None if not set
        """
        url = os.getenv("PLATFORM_URL")
        return url.rstrip("/") if url else None

    @staticmethod
    def get_anon_key() -> Optional[str]:
        """Get the hosted platform public (anon) API key."""
        return os.getenv("PLATFORM_ANON_KEY")

    @staticmethod
    def get_backend() -> str:
        """
        Get which backend to talk to.

        Returns:
            "rest" or "local". Defaults to "rest" when PLATFORM_URL is set,
            otherwise "local".
        """
        backend = os.getenv("RECIPEBOOK_BACKEND")
        if backend:
            return backend.strip().lower()
        return BACKEND_REST if PlatformConfig.get_url() else BACKEND_LOCAL

    @staticmethod
    def get_request_timeout() -> Optional[float]:
        """
        Get the HTTP timeout for platform calls.

        Returns:
            Timeout in seconds, or None (no local timeout) if unset or invalid
        """
        raw = os.getenv("PLATFORM_REQUEST_TIMEOUT")
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            logging.getLogger(__name__).warning(
                "Ignoring invalid PLATFORM_REQUEST_TIMEOUT=%r", raw
            )
            return None


class LocalConfig:
    """Configuration for the embedded (SQLAlchemy) backend."""

    @staticmethod
    def get_database_url() -> str:
        return os.getenv("LOCAL_DATABASE_URL", "sqlite:///recipebook.db")

    @staticmethod
    def get_public_url() -> str:
        url = os.getenv("LOCAL_PUBLIC_URL", "http://localhost:8501/storage")
        return url.rstrip("/")


class StorageConfig:
    """Configuration for object storage."""

    @staticmethod
    def get_recipe_images_bucket() -> str:
        return os.getenv("RECIPE_IMAGES_BUCKET", "recipe-images")


def configure_logging() -> None:
    """
    Configure root logging from LOG_LEVEL.

    Only installs a handler if the root logger has none, so repeated Streamlit
    reruns do not stack handlers.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    root.setLevel(level)


def validate_required_config() -> None:
    """
    Validate that the hosted backend is fully configured.

    Raises:
        RuntimeError: If the REST backend is selected and a required variable is missing
    """
    if PlatformConfig.get_backend() != BACKEND_REST:
        return

    missing = []
    if not PlatformConfig.get_url():
        missing.append("PLATFORM_URL (base URL of the hosted backend)")
    if not PlatformConfig.get_anon_key():
        missing.append("PLATFORM_ANON_KEY (public API key of the hosted backend)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n"
            + "\n".join(f"  - {var}" for var in missing)
            + "\n\nPlease create a .env file at the project root with these variables."
        )
