"""
Mapping template repository.

CRUD access to the mappings table, always scoped to one tenant.
Templates have no delete path; they outlive the jobs that created them.
"""

from datetime import datetime, timezone
from typing import Any, Optional
import structlog

from config import get_supabase_client
from models.mapping import MappingTemplateCreate, MappingTemplateResponse
from exceptions import DatabaseError, MappingNotFoundError

logger = structlog.get_logger(__name__)


class MappingRepository:
    """Persistence for mapping templates."""

    def __init__(self, client: Any = None):
        self.db = client if client is not None else get_supabase_client()
        self.table = "mappings"

    def insert(self, tenant_id: str, data: MappingTemplateCreate) -> str:
        """
        Insert a mapping template.

        Returns:
            Id assigned by the store

        Raises:
            DatabaseError: If the insert fails
        """
        try:
            result = (
                self.db.table(self.table)
                .insert({
                    "tenant_id": tenant_id,
                    "name": data.name,
                    "collection": data.collection,
                    "mapping": data.mapping,
                })
                .execute()
            )
            mapping_id = result.data[0]["id"]

            logger.debug("mapping_inserted", mapping_id=mapping_id, name=data.name)
            return mapping_id

        except Exception as e:
            logger.error("mapping_insert_failed", name=data.name, error=str(e))
            raise DatabaseError("insert", str(e)) from e

    def update_mapping(self, mapping_id: str, tenant_id: str, mapping: dict) -> MappingTemplateResponse:
        """
        Replace the mapping of an existing template.

        Name and collection are left untouched.

        Raises:
            MappingNotFoundError: If the tenant has no such template
            DatabaseError: If the update fails
        """
        try:
            result = (
                self.db.table(self.table)
                .update({
                    "mapping": mapping,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })
                .eq("id", mapping_id)
                .eq("tenant_id", tenant_id)
                .execute()
            )

            if not result.data:
                raise MappingNotFoundError(mapping_id)

            logger.debug("mapping_updated", mapping_id=mapping_id)
            return MappingTemplateResponse.model_validate(result.data[0])

        except MappingNotFoundError:
            raise
        except Exception as e:
            logger.error("mapping_update_failed", mapping_id=mapping_id, error=str(e))
            raise DatabaseError("update", str(e)) from e

    def find_one(self, mapping_id: str, tenant_id: str) -> Optional[MappingTemplateResponse]:
        """Get a mapping template by id, or None."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", mapping_id)
                .eq("tenant_id", tenant_id)
                .execute()
            )
        except Exception as e:
            logger.error("mapping_select_failed", mapping_id=mapping_id, error=str(e))
            raise DatabaseError("select", str(e)) from e

        if not result.data:
            return None
        return MappingTemplateResponse.model_validate(result.data[0])

    def list_for_tenant(
        self,
        tenant_id: str,
        collection: Optional[str] = None
    ) -> list[MappingTemplateResponse]:
        """Get all mapping templates of a tenant, ordered by name."""
        try:
            query = (
                self.db.table(self.table)
                .select("*")
                .eq("tenant_id", tenant_id)
            )
            if collection:
                query = query.eq("collection", collection)

            result = query.order("name").execute()
            return [MappingTemplateResponse.model_validate(row) for row in result.data]

        except Exception as e:
            logger.error("mappings_list_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("select", str(e)) from e


# Singleton instance
_mapping_repository: Optional[MappingRepository] = None


def get_mapping_repository() -> MappingRepository:
    """Get or create MappingRepository instance."""
    global _mapping_repository
    if _mapping_repository is None:
        _mapping_repository = MappingRepository()
    return _mapping_repository
