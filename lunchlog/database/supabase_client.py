from typing import Optional
import logging

from fastapi import Request
from supabase import create_client, Client
from lunchlog.config.settings import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the Supabase client. Opened on startup, released on shutdown."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[Client] = None

    def connect(self) -> Optional[Client]:
        if self._client is not None:
            return self._client
        if not self.settings.database_configured:
            logger.warning("Supabase URL/key not configured; running without a database")
            return None
        try:
            self._client = create_client(self.settings.supabase_url, self.settings.supabase_key)
            logger.info("Supabase client initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            self._client = None
        return self._client

    @property
    def client(self) -> Optional[Client]:
        return self._client

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.postgrest.session.close()
            except Exception as e:
                logger.warning(f"Error closing Supabase session: {e}")
        self._client = None


def get_supabase(request: Request) -> Optional[Client]:
    """Request dependency. None means the database is unavailable."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        return None
    return database.client
