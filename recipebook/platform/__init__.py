"""
Backend platform clients.

create_platform() builds the DataPlatform selected by configuration: the hosted
REST client when PLATFORM_URL is configured, otherwise the embedded SQLAlchemy
backend.
"""

from typing import Optional

from recipebook.config import (
    BACKEND_LOCAL,
    BACKEND_REST,
    LocalConfig,
    PlatformConfig,
    validate_required_config,
)
from recipebook.platform.base import (
    AuthenticationError,
    AuthorizationError,
    ConstraintViolationError,
    DataPlatform,
    Join,
    PlatformError,
    PlatformUnavailableError,
    UnknownRelationError,
)
from recipebook.platform.local import LocalDatabase, LocalPlatform
from recipebook.platform.rest import RestPlatform

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConstraintViolationError",
    "DataPlatform",
    "Join",
    "LocalDatabase",
    "LocalPlatform",
    "PlatformError",
    "PlatformUnavailableError",
    "RestPlatform",
    "UnknownRelationError",
    "create_local_database",
    "create_platform",
]


def create_local_database() -> LocalDatabase:
    """Create the embedded backend's shared database from configuration."""
    return LocalDatabase(
        database_url=LocalConfig.get_database_url(),
        public_url=LocalConfig.get_public_url(),
    )


def create_platform(local_database: Optional[LocalDatabase] = None) -> DataPlatform:
    """
    Build a DataPlatform for one caller.

    Args:
        local_database: Shared LocalDatabase to attach to when the local backend
            is selected. A new one is created from configuration if omitted.

    Returns:
        RestPlatform or LocalPlatform instance

    Raises:
        RuntimeError: If the REST backend is selected but not configured, or the
            backend name is unknown
    """
    backend = PlatformConfig.get_backend()

    if backend == BACKEND_REST:
        validate_required_config()
        return RestPlatform(
            url=PlatformConfig.get_url(),
            anon_key=PlatformConfig.get_anon_key(),
            timeout=PlatformConfig.get_request_timeout(),
        )

    if backend == BACKEND_LOCAL:
        return LocalPlatform(local_database or create_local_database())

    raise RuntimeError(
        f"Unknown RECIPEBOOK_BACKEND={backend!r}; expected '{BACKEND_REST}' or '{BACKEND_LOCAL}'"
    )
