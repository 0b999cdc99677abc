"""
Session management utilities for Streamlit pages.

Everything that must survive reruns and page switches within one browser
session lives in st.session_state: the platform client (carrying the signed-in
caller), the SessionProvider and the page controllers.

The embedded backend's database is shared by all browser sessions of the
process through st.cache_resource; each browser session still gets its own
LocalPlatform so callers never leak between users.
"""

from typing import Type, TypeVar

import streamlit as st

from recipebook.auth import SessionProvider
from recipebook.config import BACKEND_LOCAL, PlatformConfig
from recipebook.controllers import PageController
from recipebook.platform import DataPlatform, LocalDatabase, create_local_database, create_platform

from ui.feedback import push_notification
from utils.navigation import request_redirect

PLATFORM_KEY = "platform"
SESSION_PROVIDER_KEY = "session_provider"
CONTROLLER_KEY_PREFIX = "controller_"

C = TypeVar("C", bound=PageController)


@st.cache_resource
def get_local_database() -> LocalDatabase:
    """Process-wide embedded database (created once per server process)."""
    return create_local_database()


def get_platform() -> DataPlatform:
    """
    Get or create this browser session's platform client.

    Raises:
        RuntimeError: If the configured backend is missing settings
    """
    if PLATFORM_KEY not in st.session_state:
        local_database = get_local_database() if PlatformConfig.get_backend() == BACKEND_LOCAL else None
        st.session_state[PLATFORM_KEY] = create_platform(local_database)
    return st.session_state[PLATFORM_KEY]


def get_session_provider() -> SessionProvider:
    if SESSION_PROVIDER_KEY not in st.session_state:
        st.session_state[SESSION_PROVIDER_KEY] = SessionProvider(get_platform())
    return st.session_state[SESSION_PROVIDER_KEY]


def get_controller(controller_cls: Type[C]) -> C:
    """
    Get or create the page controller of the given class for this browser session.

    Controllers navigate through request_redirect() and raise toasts through
    push_notification(), both of which are picked up on the next render.
    """
    key = f"{CONTROLLER_KEY_PREFIX}{controller_cls.__name__}"
    if key not in st.session_state:
        st.session_state[key] = controller_cls(
            platform=get_platform(),
            sessions=get_session_provider(),
            navigate=request_redirect,
            notify=push_notification,
        )
    return st.session_state[key]
