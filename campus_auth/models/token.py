"""
Domain model representing a stored refresh token row.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class RefreshToken:
    id: int
    user_id: int
    token: str
    expiry_date: datetime
    created_at: datetime

    def __post_init__(self) -> None:
        logger.trace("Initialized RefreshToken model id=%s", self.id)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once *now* is strictly past the expiry date."""
        now = now or datetime.now(tz=timezone.utc)
        return now > self.expiry_date

    @classmethod
    def from_row(cls, row) -> "RefreshToken":
        """Build a RefreshToken from a sqlite3.Row object."""
        logger.trace("Hydrating RefreshToken from database row")
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            token=row["token"],
            expiry_date=datetime.fromisoformat(row["expiry_date"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
