"""
Connector settings repository (the credential store).

Keeps one opaque settings blob per (tenant, connector name).
"""

from datetime import datetime, timezone
from typing import Any, Optional
import structlog

from config import get_supabase_client
from models.connector_settings import ConnectorName
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class ConnectorSettingsRepository:
    """get/set named settings blobs."""

    def __init__(self, client: Any = None):
        self.db = client if client is not None else get_supabase_client()
        self.table = "connector_settings"

    def get(self, name: ConnectorName, tenant_id: str) -> Optional[dict]:
        """
        Get the settings blob stored under a connector name.

        Returns:
            Settings dict, or None if never configured
        """
        try:
            result = (
                self.db.table(self.table)
                .select("settings")
                .eq("tenant_id", tenant_id)
                .eq("name", name.value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("connector_settings_get_failed", name=name.value, error=str(e))
            raise DatabaseError("select", str(e)) from e

        if not result.data:
            return None
        return result.data[0].get("settings")

    def set(self, name: ConnectorName, tenant_id: str, settings: dict) -> datetime:
        """
        Store (insert or replace) the settings blob for a connector name.

        Returns:
            Time of the write
        """
        now = datetime.now(timezone.utc)
        try:
            self.db.table(self.table).upsert(
                {
                    "tenant_id": tenant_id,
                    "name": name.value,
                    "settings": settings,
                    "updated_at": now.isoformat(),
                },
                on_conflict="tenant_id,name",
            ).execute()

            logger.debug("connector_settings_stored", name=name.value, tenant_id=tenant_id)
            return now

        except Exception as e:
            logger.error("connector_settings_set_failed", name=name.value, error=str(e))
            raise DatabaseError("upsert", str(e)) from e


# Singleton instance
_connector_settings_repository: Optional[ConnectorSettingsRepository] = None


def get_connector_settings_repository() -> ConnectorSettingsRepository:
    """Get or create ConnectorSettingsRepository instance."""
    global _connector_settings_repository
    if _connector_settings_repository is None:
        _connector_settings_repository = ConnectorSettingsRepository()
    return _connector_settings_repository
