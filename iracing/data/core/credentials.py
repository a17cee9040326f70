"""Credential hashing for the /auth endpoint.

iRacing expects the password field to be ``base64(sha256(password + email))``
with the email lower-cased before concatenation.
"""

from __future__ import annotations

import base64
import hashlib
import re
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# (email, password) -> digest sent as the password field
CredentialHasher = Callable[[str, str], str]


class AuthRequest(BaseModel):
    """Authentication request payload."""

    email: str = Field(..., min_length=3)
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Reject syntactically invalid addresses and normalize case."""
        if not _EMAIL_RE.match(v):
            raise ValueError("email must be a valid address")
        return v.lower()

    model_config = ConfigDict(frozen=True)


def parse_auth_request(email: str, password: str) -> AuthRequest:
    """Build an AuthRequest, raising ValidationError on malformed input."""
    try:
        return AuthRequest(email=email, password=password)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid authentication request: {e}") from e


def hash_credentials(email: str, password: str) -> str:
    """Return the base64 SHA-256 digest the server expects for a login.

    Args:
        email: Account email, any case
        password: Plain text password

    Returns:
        Base64-encoded digest of ``password + email.lower()``

    Raises:
        ValidationError: If email is not a valid address
    """
    request = parse_auth_request(email, password)
    digest = hashlib.sha256(f"{request.password}{request.email}".encode()).digest()
    return base64.b64encode(digest).decode("ascii")
