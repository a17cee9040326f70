"""Authenticated session state owned by one client instance."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..config import SSO_COOKIE_NAME

logger = logging.getLogger(__name__)

_SSO_COOKIE_RE = re.compile(rf"{SSO_COOKIE_NAME}=([^;]+)")


class SessionState:
    """Holds the SSO token and authcode obtained from /auth.

    The state is empty at construction and only changes through
    ``update_from_auth`` (or an explicit ``store``). It never expires on its
    own; a stale session surfaces as an HTTP error from the server.
    """

    def __init__(self) -> None:
        self._token: str | None = None
        self._authcode: str | None = None

    def store(self, token: str, authcode: str | None = None) -> None:
        """Store the SSO token, and the authcode when one is given."""
        self._token = token
        if authcode is not None:
            self._authcode = authcode

    def current(self) -> str | None:
        """Return the stored SSO token, or None before authentication."""
        return self._token

    @property
    def authcode(self) -> str | None:
        return self._authcode

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def clear(self) -> None:
        self._token = None
        self._authcode = None

    def cookies(self) -> dict[str, str]:
        """Cookies to send with each request (empty until authenticated)."""
        if self._token is None:
            return {}
        return {SSO_COOKIE_NAME: self._token}

    def update_from_auth(self, body: Any, headers: Mapping[str, str]) -> bool:
        """Capture the session from an /auth response.

        The JSON body's ``ssoCookieValue`` wins; otherwise the SSO cookie is
        pulled out of any ``Set-Cookie`` header. An ``authcode`` in the body
        is kept either way.

        Args:
            body: Decoded JSON body of the auth response
            headers: Response headers (multi-valued mappings supported)

        Returns:
            True if a token was stored
        """
        payload = body if isinstance(body, dict) else {}
        authcode = payload.get("authcode") or None

        token = payload.get("ssoCookieValue") or None
        if token is None:
            token = self._token_from_cookies(headers)

        if token is None:
            if authcode is not None:
                self._authcode = authcode
            logger.warning("auth_session_missing", extra={"has_authcode": authcode is not None})
            return False

        self.store(token, authcode)
        logger.debug("auth_session_stored", extra={"has_authcode": self._authcode is not None})
        return True

    @staticmethod
    def _token_from_cookies(headers: Mapping[str, str]) -> str | None:
        getall = getattr(headers, "getall", None)
        if getall is not None:
            values = getall("Set-Cookie", [])
        else:
            values = [v for k, v in headers.items() if k.lower() == "set-cookie"]

        for value in values:
            match = _SSO_COOKIE_RE.search(value)
            if match:
                return match.group(1)
        return None
