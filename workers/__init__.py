# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background account setup.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (account setup)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import setup_new_account
#   result = setup_new_account.delay(account_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
