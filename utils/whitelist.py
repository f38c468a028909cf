"""
Refresh-token whitelist.

Only the SHA-256 digest of a refresh token is stored. Every write is a
single statement whose affected-row count is checked; rotation is one
conditional UPDATE keyed on the old digest, so two requests racing with the
same token cannot both succeed.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import insert, update, delete
from sqlalchemy.exc import SQLAlchemyError

from models.refresh_token import RefreshToken
from utils.errors import server_error
from utils.security import digest_token

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshWhitelist:

    def __init__(self, storage, ttl: timedelta):
        self._storage = storage
        self._ttl = ttl

    def _session(self):
        return self._storage.get_session()

    def _commit_or_fail(self, rowcount: int) -> bool:
        if not rowcount:
            self._storage.rollback()
            return False
        self._storage.save()
        return True

    def insert(self, user_id: str, token: str) -> None:
        """Whitelist a freshly issued refresh token. Raises SERVER_ERROR on
        any store failure, including a write that touched no rows."""
        session = self._session()
        try:
            self._purge(session)
            result = session.execute(
                insert(RefreshToken).values(
                    user_id=user_id,
                    digest=digest_token(token),
                    expires_at=_now() + self._ttl,
                )
            )
            ok = self._commit_or_fail(result.rowcount)
        except SQLAlchemyError:
            self._storage.rollback()
            logger.exception("Refresh token insert failed for user %s", user_id)
            raise server_error("Failed to whitelist the refresh token.")
        if not ok:
            logger.error("Refresh token insert affected no rows for user %s", user_id)
            raise server_error("Failed to whitelist the refresh token.")

    def lookup(self, token: str) -> RefreshToken | None:
        """Return the live record for token, or None. Signature and expiry of
        the token itself are the codec's job."""
        try:
            return (
                self._session()
                .query(RefreshToken)
                .filter(RefreshToken.digest == digest_token(token))
                .filter(RefreshToken.expires_at > _now())
                .one_or_none()
            )
        except SQLAlchemyError:
            self._storage.rollback()
            logger.exception("Refresh token lookup failed")
            raise server_error()

    def rotate(self, old_token: str, new_token: str) -> bool:
        """Swap the digest of old_token for new_token in one statement.
        False when no live row matched (already rotated or revoked)."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.digest == digest_token(old_token))
            .where(RefreshToken.expires_at > _now())
            .values(digest=digest_token(new_token), expires_at=_now() + self._ttl)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._session().execute(stmt)
            return self._commit_or_fail(result.rowcount)
        except SQLAlchemyError:
            self._storage.rollback()
            logger.exception("Refresh token rotation failed")
            raise server_error("Failed to whitelist the refresh token.")

    def revoke(self, token: str) -> bool:
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.digest == digest_token(token))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._session().execute(stmt)
            return self._commit_or_fail(result.rowcount)
        except SQLAlchemyError:
            self._storage.rollback()
            logger.exception("Refresh token revoke failed")
            raise server_error()

    def purge_expired(self) -> int:
        """Delete every expired record; returns how many were removed."""
        session = self._session()
        try:
            removed = self._purge(session)
            self._storage.save()
        except SQLAlchemyError:
            self._storage.rollback()
            logger.exception("Refresh token purge failed")
            raise server_error()
        return removed

    def _purge(self, session) -> int:
        result = session.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= _now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.info("Purged %d expired refresh tokens", result.rowcount)
        return result.rowcount
