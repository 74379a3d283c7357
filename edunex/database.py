"""
Supabase Connection.

``DatabaseManager`` owns the single Supabase client (auth + PostgREST)
for the process.  It contains no query logic; repositories and
services reach the client through the ``supabase`` property.

When ``SUPABASE_URL`` or ``SUPABASE_ANON_KEY`` is empty the client is
not created and the application runs offline: ``supabase`` raises
``RuntimeError``, which the auth layer reports as "provider
unavailable".

Usage (dependency injection at startup)::

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        storage=EncryptedSessionStorage(config.SESSION_STORE_PATH, logger),
        postgrest_timeout=config.POSTGREST_TIMEOUT_S,
        logger=StructuredLogger(name="database"),
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from supabase import Client as SupabaseClient
from supabase import ClientOptions, create_client

from edunex.logger import StructuredLogger

if TYPE_CHECKING:
    from edunex.services.session_storage import EncryptedSessionStorage


class DatabaseManager:
    """Holds the Supabase client, or nothing when running offline.

    Parameters
    ----------
    supabase_url:
        Project URL (e.g. ``https://xyz.supabase.co``).  May be empty.
    supabase_key:
        Anonymous (public) API key.  May be empty.
    logger:
        Structured logger.
    storage:
        Auth storage handed to the client so sessions survive a
        restart.  ``None`` keeps the client's in-memory default.
    postgrest_timeout:
        Seconds before a table query is abandoned.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
        storage: Optional[EncryptedSessionStorage] = None,
        postgrest_timeout: int = 10,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._supabase: Optional[SupabaseClient] = None

        if not (supabase_url and supabase_key):
            self._logger.warning(
                "Supabase credentials not configured; running offline."
            )
            return

        options_kwargs: dict[str, object] = {
            "auto_refresh_token": True,
            "persist_session": True,
            "postgrest_client_timeout": postgrest_timeout,
        }
        if storage is not None:
            options_kwargs["storage"] = storage

        try:
            self._supabase = create_client(
                supabase_url,
                supabase_key,
                options=ClientOptions(**options_kwargs),
            )
            self._logger.info("Supabase client initialized.")
        except (ValueError, TypeError) as exc:
            self._logger.warning(
                "Supabase credential format error: %s. Running offline.", exc,
            )
        except Exception as exc:
            self._logger.error(
                "Unexpected Supabase initialization failure: %s. Running offline.",
                exc,
                exc_info=True,
            )

    @classmethod
    def from_client(cls, client: SupabaseClient, logger: StructuredLogger) -> "DatabaseManager":
        """Wrap an already-built client (used by tests and tooling)."""
        manager = cls.__new__(cls)
        manager._logger = logger
        manager._supabase = client
        return manager

    @property
    def supabase(self) -> SupabaseClient:
        """Return the Supabase client.

        Raises
        ------
        RuntimeError
            If the client was not initialised (offline).
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not available (offline or not configured)."
            )
        return self._supabase
