"""
JWT creation and verification.

Tokens are compact HS256 JWTs (``header.payload.signature``, base64url,
no padding) carrying ``userId``, ``userType``, ``iat`` and ``exp``.
The signing secret and lifetime come from the ``Settings`` object the
service is constructed with.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass

from utils.schemas import Role

_HEADER = {"alg": "HS256", "typ": "JWT"}


class InvalidTokenError(Exception):
    """Malformed, forged or expired token."""


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    role: Role


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(s: str) -> bytes:
    padding = -len(s) % 4
    return base64.urlsafe_b64decode(s + "=" * padding)


def _encode_segment(obj: dict) -> str:
    return _b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


class TokenService:
    """Stateless issuer / verifier bound to one secret."""

    def __init__(self, secret: str, expiry_seconds: int) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret.encode("utf-8")
        self.expiry_seconds = expiry_seconds

    def _sign(self, signing_input: str) -> str:
        sig = hmac.new(self._secret, signing_input.encode("ascii"), hashlib.sha256).digest()
        return _b64url_encode(sig)

    def issue(self, account_id: str, role: Role, now: float | None = None) -> str:
        """Create a signed token for ``account_id`` expiring ``expiry_seconds`` after ``now``."""
        issued_at = int(time.time() if now is None else now)
        payload = {
            "userId": str(account_id),
            "userType": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        signing_input = f"{_encode_segment(_HEADER)}.{_encode_segment(payload)}"
        return f"{signing_input}.{self._sign(signing_input)}"

    def verify(self, token: str, now: float | None = None) -> TokenClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidTokenError`` on bad format, bad signature,
        unknown role or expiry.
        """
        if not token or not token.isascii():
            raise InvalidTokenError("bad format")
        parts = token.split(".")
        if len(parts) != 3:
            raise InvalidTokenError("bad format")
        header_b64, payload_b64, signature = parts

        expected = self._sign(f"{header_b64}.{payload_b64}")
        if not hmac.compare_digest(signature, expected):
            raise InvalidTokenError("bad signature")

        try:
            header = json.loads(_b64url_decode(header_b64))
            payload = json.loads(_b64url_decode(payload_b64))
        except (ValueError, UnicodeDecodeError) as exc:
            raise InvalidTokenError("undecodable segment") from exc
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise InvalidTokenError("unsupported algorithm")
        if not isinstance(payload, dict):
            raise InvalidTokenError("bad payload")

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            raise InvalidTokenError("missing expiry")
        current = time.time() if now is None else now
        if exp <= current:
            raise InvalidTokenError("token expired")

        account_id = payload.get("userId")
        if not isinstance(account_id, str) or not account_id:
            raise InvalidTokenError("missing subject")
        try:
            role = Role(payload.get("userType"))
        except ValueError as exc:
            raise InvalidTokenError("unknown role") from exc
        return TokenClaims(account_id=account_id, role=role)
