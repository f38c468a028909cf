"""
Auth flow: signup, login, access-token verification, refresh rotation
and logout, composed from the codec, the credential verifier and the
refresh whitelist.

The only session state is the token pair held by the client plus the
whitelist row; each call is independent. Failures leave here as AuthError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.user import User
from models.schemas.auth import SignupInput, LoginInput
from utils.errors import unauthorized, conflict, not_found, server_error
from utils.security import TokenCodec, CredentialVerifier, ACCESS, REFRESH
from utils.whitelist import RefreshWhitelist

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}


class AuthFlow:

    def __init__(self, storage, codec: TokenCodec, verifier: CredentialVerifier,
                 whitelist: RefreshWhitelist):
        self.storage = storage
        self.codec = codec
        self.verifier = verifier
        self.whitelist = whitelist

    def signup(self, data: SignupInput) -> str:
        """Create a user and return its id. Email uniqueness is left to the
        store's unique constraint."""
        user = User(
            name=data.name,
            email=data.email,
            password_hash=self.verifier.hash(data.password),
        )
        self.storage.new(user)
        try:
            self.storage.save()
        except IntegrityError:
            logger.info("Signup rejected: email already registered")
            raise conflict("Email already registered")
        except SQLAlchemyError:
            logger.exception("Signup failed")
            raise server_error()
        logger.info("User %s signed up", user.id)
        return user.id

    def login(self, data: LoginInput) -> TokenPair:
        """Check credentials and hand out a whitelisted token pair.
        Nothing is returned unless the refresh token was whitelisted."""
        try:
            user = (
                self.storage.get_session()
                .query(User)
                .filter(User.email == data.email)
                .one_or_none()
            )
        except SQLAlchemyError:
            self.storage.rollback()
            logger.exception("User lookup failed during login")
            raise server_error()

        if user is None:
            self.verifier.burn(data.password)
            logger.info("Login failed: unknown email")
            raise unauthorized("Invalid email or password.")
        if not self.verifier.verify(data.password, user.password_hash):
            logger.info("Login failed for user %s: bad password", user.id)
            raise unauthorized("Invalid email or password.")

        pair = self._issue_pair(user.id)
        self.whitelist.insert(user.id, pair.refresh_token)
        logger.info("User %s logged in", user.id)
        return pair

    def verify_access(self, access_token: str | None) -> dict:
        return self.codec.parse(access_token, ACCESS)

    def current_user(self, access_token: str | None) -> User:
        claims = self.verify_access(access_token)
        try:
            user = self.storage.get(User, claims["user_id"])
        except SQLAlchemyError:
            self.storage.rollback()
            logger.exception("User fetch failed")
            raise server_error()
        if user is None:
            raise not_found("User not found")
        return user

    def refresh(self, refresh_token: str | None) -> TokenPair:
        """Exchange a live refresh token for a new pair, invalidating it."""
        claims = self.codec.parse(refresh_token, REFRESH)
        if self.whitelist.lookup(refresh_token) is None:
            logger.info("Refresh rejected for user %s: token not whitelisted", claims["user_id"])
            raise unauthorized("Unauthorized: Invalid Refresh Token.")

        pair = self._issue_pair(claims["user_id"])
        if not self.whitelist.rotate(refresh_token, pair.refresh_token):
            # lost a race with a concurrent refresh of the same token
            logger.warning("Refresh rotation for user %s matched no rows", claims["user_id"])
            raise server_error("Failed to whitelist the refresh token.")
        logger.info("Rotated refresh token for user %s", claims["user_id"])
        return pair

    def logout(self, refresh_token: str | None) -> None:
        claims = self.codec.parse(refresh_token, REFRESH)
        if not self.whitelist.revoke(refresh_token):
            raise unauthorized("Unauthorized: Invalid Refresh Token.")
        logger.info("Revoked refresh token for user %s", claims["user_id"])

    def _issue_pair(self, user_id: str) -> TokenPair:
        return TokenPair(
            access_token=self.codec.issue(user_id, ACCESS),
            refresh_token=self.codec.issue(user_id, REFRESH),
        )
