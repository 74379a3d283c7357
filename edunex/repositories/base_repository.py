"""
Base Repository.

Shared plumbing for repositories: the ``DatabaseManager`` and logger
references, and a shortcut to the Supabase table a repository owns.
"""

from __future__ import annotations

from supabase import Client as SupabaseClient

from edunex.database import DatabaseManager
from edunex.logger import StructuredLogger


class BaseRepository:
    """Base class for all repositories.  Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        table: str = "",
    ) -> None:
        self._db = db
        self._logger = logger
        self._table_name: str = table or self.TABLE

    @property
    def supabase(self) -> SupabaseClient:
        """The Supabase client.  Raises ``RuntimeError`` when offline."""
        return self._db.supabase

    def _table(self):  # noqa: ANN202 - postgrest builder type varies by version
        return self.supabase.table(self._table_name)
