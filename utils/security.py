"""
security helpers:
- Argon2 password hashing via argon2-cffi (CredentialVerifier)
- Signed, expiring access/refresh JWTs via PyJWT (TokenCodec)
- One-way digest of refresh tokens for the server-side whitelist
"""
from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from utils.errors import unauthorized, forbidden

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"
PURPOSES = (ACCESS, REFRESH)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def digest_token(token: str) -> str:
    """SHA-256 hex digest of a token string; the only form ever persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Issues and parses signed tokens carrying {sub, type}.

    Both TTLs and the secret are fixed at construction; parse() fails closed
    and only ever raises AuthError.
    """

    def __init__(self, secret: str, access_ttl: timedelta, refresh_ttl: timedelta,
                 algorithm: str = "HS256", issuer: str = "shop-auth-api"):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._ttl = {ACCESS: access_ttl, REFRESH: refresh_ttl}

    def ttl(self, purpose: str) -> timedelta:
        return self._ttl[purpose]

    def issue(self, user_id: str, purpose: str) -> str:
        if purpose not in PURPOSES:
            raise ValueError(f"Unknown token purpose: {purpose}")
        now = _now()
        payload = {
            "iss": self._issuer,
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl[purpose]).timestamp()),
            "type": purpose,
            # keeps two tokens issued in the same second distinct
            "jti": generate_jti(),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def parse(self, token: str | None, expected_purpose: str) -> Dict[str, Any]:
        """
        Decode and validate a token. Returns {"user_id": ...}.
        Expired/invalid/missing -> 401, wrong purpose -> 403.
        """
        if not token:
            raise unauthorized("Unauthorized: token is missing.")
        try:
            decoded = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError:
            raise unauthorized("Unauthorized: token expired.")
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc.__class__.__name__)
            raise unauthorized("Unauthorized: invalid token.")

        if decoded.get("type") != expected_purpose:
            raise forbidden(f"Forbidden: expected an {expected_purpose} token.")
        return {"user_id": decoded["sub"]}


class CredentialVerifier:
    """Argon2 hashing with work factors fixed from configuration."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536):
        self._ph = PasswordHasher(time_cost=time_cost, memory_cost=memory_cost)
        # verified against when the account does not exist
        self._dummy_hash = self._ph.hash(secrets.token_urlsafe(16))

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """ Verify a plaintext password against an argon2 hash
        """
        try:
            return self._ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def burn(self, password: str) -> bool:
        """Run a verification against a throwaway hash so unknown accounts
        cost the same as a wrong password."""
        self.verify(password, self._dummy_hash)
        return False
