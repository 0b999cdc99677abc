"""
Session/auth provider.

SessionProvider owns the current signed-in session for one browser session and
broadcasts identity changes to subscribers (page controllers, the header). It
also points the DataPlatform at the current caller so that row-level rules apply.
"""

import logging
from typing import Callable, List, Optional

from recipebook.models import AuthSession, Identity
from recipebook.platform.base import DataPlatform, PlatformError

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Identity]], None]


class SessionProvider:
    """
    Current identity plus sign-up / sign-in / sign-out and change notifications.

    Args:
        platform: DataPlatform used for auth calls; its caller follows the session
    """

    def __init__(self, platform: DataPlatform):
        self.platform = platform
        self._session: Optional[AuthSession] = None
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def identity(self) -> Optional[Identity]:
        return self._session.identity if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with the new identity (or None) on every change.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Optional[AuthSession]) -> None:
        self._session = session
        self.platform.set_auth(session)
        identity = self.identity
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception:
                # one broken subscriber must not stop the broadcast
                logger.exception("Session listener %r failed", listener)

    def sign_in(self, email: str, password: str) -> Identity:
        """
        Sign in with email and password.

        Raises:
            PlatformError: AuthenticationError on bad credentials, or any transport error
        """
        session = self.platform.sign_in(email, password)
        logger.info("Signed in as %s", session.identity.id)
        self._set_session(session)
        return session.identity

    def sign_up(self, email: str, password: str, username: Optional[str] = None) -> Optional[Identity]:
        """
        Register a new account.

        Args:
            username: Optional display name stored in metadata; the profile username
                defaults to the email local-part when omitted

        Returns:
            The signed-in identity, or None when the platform requires email
            confirmation first (no session is started in that case)
        """
        metadata = {"username": username.strip()} if username and username.strip() else {}
        session = self.platform.sign_up(email, password, metadata)
        if session is None:
            logger.info("Sign-up for %s awaits email confirmation", email)
            return None
        logger.info("Signed up as %s", session.identity.id)
        self._set_session(session)
        return session.identity

    def sign_out(self) -> None:
        """
        End the session.

        The local session is always cleared, even if revoking the token on the
        platform fails.
        """
        if self._session is None:
            return
        try:
            self.platform.sign_out()
        except PlatformError as e:
            logger.warning("Sign-out on the platform failed, clearing local session anyway: %s", e.message)
        self._set_session(None)
