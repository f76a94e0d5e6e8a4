"""
Job item repository.

CRUD access to the job_items table, always scoped to one tenant.
No business rules live here: the removal gate is decided by the caller and
passed down as a status to exclude from the delete.
"""

from typing import Any, Optional
import structlog

from config import get_supabase_client
from models.job_item import JobItemResponse, JobStatus, JobType
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class JobItemRepository:
    """Persistence for job items."""

    def __init__(self, client: Any = None):
        self.db = client if client is not None else get_supabase_client()
        self.table = "job_items"

    def insert(self, record: dict) -> str:
        """
        Insert a job item.

        Args:
            record: Column values (JSON-ready)

        Returns:
            Id assigned by the store

        Raises:
            DatabaseError: If the insert fails
        """
        try:
            result = self.db.table(self.table).insert(record).execute()
            job_item_id = result.data[0]["id"]

            logger.debug("job_item_inserted", job_item_id=job_item_id)
            return job_item_id

        except Exception as e:
            logger.error("job_item_insert_failed", error=str(e))
            raise DatabaseError("insert", str(e)) from e

    def find_one(self, job_item_id: str, tenant_id: str) -> Optional[JobItemResponse]:
        """
        Get a job item by id.

        Returns:
            JobItemResponse, or None if the tenant has no such item
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", job_item_id)
                .eq("tenant_id", tenant_id)
                .execute()
            )
        except Exception as e:
            logger.error("job_item_select_failed", job_item_id=job_item_id, error=str(e))
            raise DatabaseError("select", str(e)) from e

        if not result.data:
            return None

        return JobItemResponse.model_validate(result.data[0])

    def list_for_tenant(
        self,
        tenant_id: str,
        page: int = 1,
        page_size: int = 20,
        status: Optional[JobStatus] = None,
        job_type: Optional[JobType] = None
    ) -> tuple[list[JobItemResponse], int]:
        """
        Get job items of a tenant, newest first.

        Returns:
            Tuple of (job items, total count)
        """
        try:
            query = (
                self.db.table(self.table)
                .select("*", count="exact")
                .eq("tenant_id", tenant_id)
            )

            if status:
                query = query.eq("status", status.value)
            if job_type:
                query = query.eq("job_type", job_type.value)

            offset = (page - 1) * page_size
            result = (
                query
                .order("uploaded_at", desc=True)
                .range(offset, offset + page_size - 1)
                .execute()
            )

            items = [JobItemResponse.model_validate(row) for row in result.data]
            total = result.count if result.count is not None else len(items)
            return items, total

        except Exception as e:
            logger.error("job_items_list_failed", tenant_id=tenant_id, error=str(e))
            raise DatabaseError("select", str(e)) from e

    def remove(
        self,
        job_item_id: str,
        tenant_id: str,
        exclude_status: Optional[JobStatus] = None
    ) -> int:
        """
        Delete a job item.

        Args:
            job_item_id: Job item UUID
            tenant_id: Owning tenant
            exclude_status: Leave the row alone if it currently has this status

        Returns:
            Number of rows deleted (0 or 1)
        """
        try:
            query = (
                self.db.table(self.table)
                .delete()
                .eq("id", job_item_id)
                .eq("tenant_id", tenant_id)
            )
            if exclude_status:
                query = query.neq("status", exclude_status.value)

            result = query.execute()
            deleted = len(result.data or [])

            logger.debug("job_item_delete_executed", job_item_id=job_item_id, deleted=deleted)
            return deleted

        except Exception as e:
            logger.error("job_item_delete_failed", job_item_id=job_item_id, error=str(e))
            raise DatabaseError("delete", str(e)) from e


# Singleton instance
_job_item_repository: Optional[JobItemRepository] = None


def get_job_item_repository() -> JobItemRepository:
    """Get or create JobItemRepository instance."""
    global _job_item_repository
    if _job_item_repository is None:
        _job_item_repository = JobItemRepository()
    return _job_item_repository
