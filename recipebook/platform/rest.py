"""
Hosted platform client.

Talks to a hosted backend-as-a-service over HTTP using requests:
- Tables through a PostgREST-style endpoint:   {url}/rest/v1/{table}
- Objects through the storage endpoint:         {url}/storage/v1/object/{bucket}/{key}
- Password auth through the auth endpoint:      {url}/auth/v1/...

Every request carries the project's public key in the `apikey` header and a
bearer token: the signed-in caller's access token, or the public key when
anonymous. Row-level security is enforced by the platform, not here.

# NOTE: Failures are translated into PlatformError subclasses so that page
    controllers never see requests exceptions.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from recipebook.models import AuthSession, Identity
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

logger = logging.getLogger(__name__)

# Postgres SQLSTATE class 23 = integrity constraint violation
_CONSTRAINT_CODE_PREFIX = "23"
# insufficient_privilege / RLS violation
_RLS_CODE = "42501"
# undefined_table / undefined_column
_UNKNOWN_RELATION_CODES = {"42P01", "42703", "PGRST200", "PGRST204", "PGRST205"}


def _eq_params(eq: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """Build PostgREST equality filters (`col=eq.value`)."""
    params = []
    for column, value in (eq or {}).items():
        if value is None:
            params.append((column, "is.null"))
        elif isinstance(value, bool):
            params.append((column, f"eq.{str(value).lower()}"))
        else:
            params.append((column, f"eq.{value}"))
    return params


def _error_message(response: requests.Response) -> Tuple[str, Optional[str]]:
    """Extract (message, code) from a platform error body."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or f"HTTP {response.status_code}", None)

    if not isinstance(body, dict):
        return (str(body), None)

    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )
    # storage errors report the effective status in the body
    code = body.get("code") or body.get("error_code") or body.get("statusCode")
    return (str(message), str(code) if code is not None else None)


def _parse_identity(user: Dict[str, Any]) -> Identity:
    return Identity(
        id=str(user["id"]),
        email=user.get("email"),
        metadata=user.get("user_metadata") or {},
    )


def _parse_session(body: Dict[str, Any]) -> Optional[AuthSession]:
    """Build an AuthSession from an auth response, or None if it carries no token."""
    token = body.get("access_token")
    if not token:
        return None
    return AuthSession(
        access_token=token,
        refresh_token=body.get("refresh_token"),
        identity=_parse_identity(body["user"]),
    )


class RestPlatform(DataPlatform):
    """
    DataPlatform backed by a hosted PostgREST / storage / auth API.

    Args:
        url: Project base URL (e.g. https://xyz.example.co)
        anon_key: Project public API key
        timeout: Optional request timeout in seconds (None = no local timeout)
    """

    def __init__(self, url: str, anon_key: str, timeout: Optional[float] = None):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._session: Optional[AuthSession] = None

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        token = self._session.access_token if self._session else self.anon_key
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Any = None,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        auth_call: bool = False,
    ) -> requests.Response:
        """
        Issue one request and translate failures into PlatformError subclasses.

        Args:
            auth_call: Treat 400/401/422 as AuthenticationError (auth endpoints)
        """
        url = f"{self.url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise PlatformUnavailableError(f"Request to the platform timed out: {e}") from e
        except requests.exceptions.ConnectionError as e:
            raise PlatformUnavailableError(f"Could not connect to the platform: {e}") from e
        except requests.exceptions.RequestException as e:
            raise PlatformError(f"Platform request failed: {e}") from e

        if response.ok:
            return response

        status = response.status_code
        message, code = _error_message(response)

        if auth_call and status in (400, 401, 422):
            raise AuthenticationError(message, status)
        if status in (401, 403) or code in (_RLS_CODE, "401", "403"):
            raise AuthorizationError(message, status)
        if status == 409 or code == "409" or (code and code.startswith(_CONSTRAINT_CODE_PREFIX)):
            raise ConstraintViolationError(message, status)
        if code in _UNKNOWN_RELATION_CODES or status == 404:
            raise UnknownRelationError(message, status)
        raise PlatformError(message, status)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        *,
        eq: Optional[Dict[str, Any]] = None,
        join: Optional[Join] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        select = "*"
        if join is not None:
            select = f"*,{join.select_clause()}"

        params = [("select", select)]
        params.extend(_eq_params(eq))
        if order_by:
            params.append(("order", f"{order_by}.{'asc' if ascending else 'desc'}"))

        response = self._request("GET", f"/rest/v1/{table}", params=params)
        return response.json() or []

    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "POST",
            f"/rest/v1/{table}",
            json=record,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json() or []
        if not rows:
            # RLS can hide the inserted row from the returned representation
            raise AuthorizationError(
                f"inserted row in {table} is not visible to the caller", response.status_code
            )
        return rows[0]

    def update(
        self, table: str, values: Dict[str, Any], *, eq: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        response = self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=_eq_params(eq),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return response.json() or []

    def delete(self, table: str, *, eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=_eq_params(eq),
            headers={"Prefer": "return=representation"},
        )
        return response.json() or []

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        headers = {
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "false",
        }
        self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(key)}",
            data=content,
            headers=headers,
        )
        return key

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.url}/storage/v1/object/public/{bucket}/{quote(key)}"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuthSession]:
        response = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
            auth_call=True,
        )
        # Without auto-confirm the platform returns the bare user, no session
        return _parse_session(response.json() or {})

    def sign_in(self, email: str, password: str) -> AuthSession:
        response = self._request(
            "POST",
            "/auth/v1/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
            auth_call=True,
        )
        session = _parse_session(response.json() or {})
        if session is None:
            raise AuthenticationError("Sign-in response did not contain a session")
        return session

    def sign_out(self) -> None:
        if self._session is None:
            return
        self._request("POST", "/auth/v1/logout")

    def set_auth(self, session: Optional[AuthSession]) -> None:
        self._session = session
