"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.job_items import router as job_items_router
from routes.mappings import router as mappings_router
from routes.connectors import router as connectors_router

__all__ = [
    "job_items_router",
    "mappings_router",
    "connectors_router",
]
