"""
Base data-access client for the backend platform.

This module defines the abstract interface that every backend client implements:
table reads and writes against a relational store with row-level security, object
storage in public buckets, and password authentication. The page controllers only
ever talk to a DataPlatform, so the hosted client and the embedded local store are
interchangeable.

All implementations must:
- Return table rows as plain dicts (JSON-compatible values)
- Embed joined rows under the joined table's name (e.g. row["profiles"])
- Apply row-level rules the way the hosted store does: inserts for another owner
  are rejected, updates/deletes silently skip rows the caller does not own
- Raise a PlatformError subclass for every failure
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from recipebook.models import AuthSession


class PlatformError(Exception):
    """
    Base error for every failed platform call.

    Attributes:
        message: Human-readable message (as reported by the platform when available)
        status: HTTP-like status code, if known
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class PlatformUnavailableError(PlatformError):
    """The platform could not be reached (DNS, connection refused, timeout)."""


class AuthorizationError(PlatformError):
    """The caller is not allowed to perform the operation (row-level security)."""


class AuthenticationError(PlatformError):
    """Sign-in or sign-up was rejected (bad credentials, already registered)."""


class ConstraintViolationError(PlatformError):
    """A foreign key, unique or not-null constraint rejected the write."""


class UnknownRelationError(PlatformError):
    """The table or column named in the request does not exist."""


@dataclass(frozen=True)
class Join:
    """
    A read-time join to a related table by foreign key.

    Attributes:
        table: Related table name (e.g. "profiles")
        columns: Columns of the related table to embed (e.g. ("username",))
    """
    table: str
    columns: Sequence[str] = ("*",)

    def select_clause(self) -> str:
        return f"{self.table}({','.join(self.columns)})"


class DataPlatform(ABC):
    """
    Abstract base class for backend platform clients.

    A DataPlatform instance acts on behalf of at most one caller at a time; use
    set_auth() to switch caller after sign-in or sign-out.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        eq: Optional[Dict[str, Any]] = None,
        join: Optional[Join] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name
            eq: Optional equality filters, column -> value
            join: Optional related table to embed in each row
            order_by: Optional column to order by
            ascending: Sort direction for order_by

        Returns:
            Ordered list of row dicts
        """

    @abstractmethod
    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (with defaults filled in)."""

    @abstractmethod
    def update(
        self, table: str, values: Dict[str, Any], *, eq: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Update rows matching eq and return the rows actually updated."""

    @abstractmethod
    def delete(self, table: str, *, eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Delete rows matching eq.

        Returns:
            The rows actually deleted. Deleting rows that are already gone (or
            that the caller does not own) returns an empty list, not an error.
        """

    @abstractmethod
    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """Store a blob under key in bucket and return the key."""

    @abstractmethod
    def get_public_url(self, bucket: str, key: str) -> str:
        """Return the stable public URL for an object in a public bucket."""

    def image_source(self, url: str) -> Any:
        """
        Return what an image widget should be given for a public URL.

        Hosted platforms serve public URLs over HTTP, so the URL itself is enough.
        """
        return url

    @abstractmethod
    def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuthSession]:
        """
        Register a new identity.

        Returns:
            The new session, or None when the platform requires the email to be
            confirmed before signing in.
        """

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """Authenticate with email and password."""

    @abstractmethod
    def sign_out(self) -> None:
        """Revoke the current caller's session on the platform."""

    @abstractmethod
    def set_auth(self, session: Optional[AuthSession]) -> None:
        """Act as the given session's caller for subsequent calls (None = anonymous)."""
