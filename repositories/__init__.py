"""
Data access for the connector tables.

Each repository wraps one Supabase table and carries no business rules.
"""

from repositories.job_item_repository import JobItemRepository, get_job_item_repository
from repositories.mapping_repository import MappingRepository, get_mapping_repository
from repositories.connector_settings_repository import (
    ConnectorSettingsRepository,
    get_connector_settings_repository,
)

__all__ = [
    "JobItemRepository",
    "get_job_item_repository",
    "MappingRepository",
    "get_mapping_repository",
    "ConnectorSettingsRepository",
    "get_connector_settings_repository",
]
