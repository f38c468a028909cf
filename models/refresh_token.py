"""
RefreshToken model: the refresh-token whitelist.
Fields:
- digest (unique) - SHA-256 hex of the issued refresh token; the raw token is never stored
- user_id (String(36)) - FK to users.id
- expires_at - end of the token's lifetime; expired rows are purged lazily
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    digest = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<RefreshToken user_id={self.user_id}>"
