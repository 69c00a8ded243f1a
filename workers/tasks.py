# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for account lifecycle events.
#
# Tasks:
# - setup_new_account: Give a freshly registered account its family and
#   default profile. Queued once by signup; safe to deliver twice.
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


# =============================================================================
# Account Lifecycle Tasks
# =============================================================================

@shared_task(
    bind=True,
    name="workers.tasks.setup_new_account",
    autoretry_for=(SupabaseClientError,),
    retry_backoff=True,
    max_retries=5,
)
def setup_new_account(self, account_id: str) -> dict[str, Any]:
    """
    Provision a new account with a family and a default profile.

    Accounts that already have a family are skipped, so duplicate or
    delayed deliveries do nothing. Database errors propagate so Celery
    retries the task; a half-provisioned account never commits.

    Args:
        account_id: The account (auth user) UUID

    Returns:
        Dict with:
        - account_id: The account UUID
        - provisioned: True if this run created the family and profile
    """
    from core.services.account_service import AccountService

    logger.info(f"Setting up account {account_id} (attempt {self.request.retries + 1})")

    provisioned = AccountService.provision_new_account(account_id)

    return {
        "account_id": account_id,
        "provisioned": provisioned,
    }
