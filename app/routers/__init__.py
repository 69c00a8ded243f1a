# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - profiles.py: Profile listing, selection and management endpoints
# - tasks.py: Account setup task status endpoint
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import profiles
from . import tasks

__all__ = [
    "health",
    "profiles",
    "tasks",
]
