"""
Shared page-controller plumbing: routes, notifications and the auth gate.

Controllers never touch Streamlit. The UI hands them a `navigate` callable and a
`notify` callable, which keeps them testable with plain mocks.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from recipebook.auth import SessionProvider
from recipebook.models import Identity
from recipebook.platform.base import DataPlatform

logger = logging.getLogger(__name__)

VARIANT_DEFAULT = "default"
VARIANT_DESTRUCTIVE = "destructive"


class Route(str, Enum):
    AUTH = "auth"
    FEED = "feed"
    PROFILE = "profile"
    CREATE = "create"


@dataclass(frozen=True)
class Notification:
    """A transient, non-blocking message shown to the user (a toast)."""
    title: str
    description: Optional[str] = None
    variant: str = VARIANT_DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == VARIANT_DESTRUCTIVE


Navigator = Callable[[Route], None]
Notifier = Callable[[Notification], None]


class PageController:
    """
    Base class for the authenticated pages.

    mount() is the auth gate: without a session it navigates to the sign-in page
    and returns False. With a session it loads the page once per identity.
    After the first mount the controller follows session changes: signing out
    clears its state and redirects; a different identity clears and reloads.

    Args:
        platform: DataPlatform acting as the signed-in caller
        sessions: SessionProvider for the current browser session
        navigate: Called with a Route to change page
        notify: Called with a Notification to show a toast
    """

    def __init__(
        self,
        platform: DataPlatform,
        sessions: SessionProvider,
        navigate: Navigator,
        notify: Notifier,
    ):
        self.platform = platform
        self.sessions = sessions
        self.navigate = navigate
        self.notify = notify
        self.identity: Optional[Identity] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.reset()

    def mount(self, entering: bool = False) -> bool:
        """
        Apply the auth gate and load data for a new identity.

        Args:
            entering: True on the first render after navigating to the page;
                the data is fetched again even if the identity is unchanged

        Returns:
            True if the page may render, False if the caller was redirected
        """
        if self._unsubscribe is None:
            self._unsubscribe = self.sessions.subscribe(self._on_identity_change)

        identity = self.sessions.identity
        if identity is None:
            self.navigate(Route.AUTH)
            return False

        if self.identity is None or self.identity.id != identity.id:
            self._switch_identity(identity)
        elif entering:
            self.refresh()
        return True

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self.identity = None
            self.reset()
            self.navigate(Route.AUTH)
            return
        if self.identity is None or self.identity.id != identity.id:
            self._switch_identity(identity)

    def _switch_identity(self, identity: Identity) -> None:
        logger.debug("%s loading for %s", type(self).__name__, identity.id)
        self.identity = identity
        self.reset()
        self.load()

    def reset(self) -> None:
        """Clear view state. Subclasses define their fields here."""

    def load(self) -> None:
        """Fetch the page's data for self.identity."""

    def refresh(self) -> None:
        """Fetch again on demand."""
        if self.identity is not None:
            self.load()
