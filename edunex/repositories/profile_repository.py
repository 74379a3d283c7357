"""
Profile Repository.

Data access for institutional user profiles (the ``users`` table).
Profiles are created, read, and never updated or deleted by the
client.
"""

from __future__ import annotations

from typing import Optional

from edunex.database import DatabaseManager
from edunex.logger import StructuredLogger
from edunex.models.user import User
from edunex.repositories.base_repository import BaseRepository

# PostgREST code for "zero rows" on a single-row select.
_PGRST_NO_ROWS: str = "PGRST116"


class ProfileNotCreatedError(LookupError):
    """Raised when an insert-if-absent neither inserted nor found a row."""


class ProfileRepository(BaseRepository):
    """Data access layer for ``User`` profiles."""

    TABLE = "users"

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        table: str = "",
    ) -> None:
        super().__init__(db, logger, table)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Fetch the profile for *user_id*.

        Returns ``None`` when no profile exists.  Any other failure
        (network, permissions, malformed row) propagates.
        """
        try:
            response = (
                self._table()
                .select("*")
                .eq("id", user_id)
                .maybe_single()
                .execute()
            )
        except Exception as exc:
            if getattr(exc, "code", None) == _PGRST_NO_ROWS:
                return None
            raise

        # Newer postgrest clients return ``None`` instead of an empty response.
        if response is None or not response.data:
            return None
        return User(**response.data)

    def insert_if_absent(self, user: User) -> tuple[User, bool]:
        """Create *user*'s profile unless one already exists for its id.

        Upserts keyed by ``id`` with duplicates ignored, so two sessions
        racing to create the same profile converge on one row.  When the
        write returns nothing (the row already existed) the stored
        profile is read back instead of *user*.

        Returns:
            ``(profile, created)``; ``created`` is ``False`` when the row
            was written by someone else.

        Raises:
            ProfileNotCreatedError: If no row exists afterwards.
        """
        payload = user.model_dump(mode="json", exclude_none=True)

        response = (
            self._table()
            .upsert(payload, on_conflict="id", ignore_duplicates=True)
            .execute()
        )
        if response is not None and response.data:
            created = User(**response.data[0])
            self._logger.info("Profile created: %s (%s)", created.id, created.role)
            return created, True

        existing = self.get_by_id(user.id)
        if existing is None:
            raise ProfileNotCreatedError(
                f"Profile for {user.id} was neither inserted nor found"
            )
        self._logger.info("Profile already existed: %s", existing.id)
        return existing, False
