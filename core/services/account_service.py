# =============================================================================
# core/services/account_service.py - Account Business Logic
# =============================================================================
# Handles account lookups, the sign-in -> pick-profile gate state, and the
# one-time setup that gives every new account a family and a first profile.
# =============================================================================

import logging
import random
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import email_local_part
from core.models.account import AccessState, Account
from core.models.profile import AVATAR_COLORS
from app.exceptions import NotAuthenticatedError

logger = logging.getLogger(__name__)

DEFAULT_FAMILY_NAME = "My Family"
DEFAULT_PROFILE_NAME = "Me"


class AccountService:
    """
    Service for account operations.

    Provides a clean interface between API routes, Celery tasks and database.
    """

    @staticmethod
    def get_account(account_id: UUID | str | None) -> Account | None:
        """
        Get the account row for an authenticated user.

        Returns:
            Account, or None if unauthenticated or the row doesn't exist yet
        """
        if account_id is None:
            return None

        row = SupabaseClient.fetch_account(account_id)
        return Account(**row) if row else None

    @staticmethod
    def get_access_state(account_id: UUID | str | None) -> AccessState:
        """
        Work out where the caller stands in the two-stage gate.

        App content renders only in the READY state: a session plus a
        selected profile.
        """
        if account_id is None:
            return AccessState.UNAUTHENTICATED

        account = AccountService.get_account(account_id)
        if account is None or account.family_id is None:
            return AccessState.PROVISIONING
        if account.profile_id is None:
            return AccessState.NEEDS_PROFILE
        return AccessState.READY

    @staticmethod
    def clear_profile_selection(account_id: UUID | str | None) -> None:
        """
        Drop the account's selected profile (used by "switch profile").

        The profile itself is untouched; the account goes back to the
        needs_profile state.

        Raises:
            NotAuthenticatedError: If there is no acting account
        """
        if account_id is None:
            raise NotAuthenticatedError()

        SupabaseClient.update_account(account_id, {"profile_id": None})
        logger.info(f"Cleared profile selection for account: {account_id}")

    @staticmethod
    def ensure_account_setup(account_id: UUID | str) -> str | None:
        """
        Queue setup_new_account if the account row exists but has no family.

        Called on signup, sign-in and while the gate reports provisioning, so
        an enqueue lost to a broker outage is retried on the next visit. The
        task is idempotent, so an extra delivery does nothing.

        Returns:
            Celery task id, or None if nothing was queued
        """
        try:
            account = AccountService.get_account(account_id)
            if account is None or account.family_id is not None:
                return None

            from workers.tasks import setup_new_account

            result = setup_new_account.delay(str(account_id))

        except Exception as e:
            logger.error(f"Could not queue account setup for {account_id}: {e}")
            return None

        logger.info(f"Queued account setup for {account_id}: task {result.id}")
        return result.id

    @staticmethod
    def provision_new_account(account_id: UUID | str) -> bool:
        """
        Give a newly created account its family and default profile.

        Safe to run more than once: an account that already has a family is
        left alone. The family, the profile and the account links are written
        in one database transaction.

        Family name: "<email local part>'s Family", else "My Family".
        Profile name: display name, else email local part, else "Me".
        Profile color: random palette entry.

        Returns:
            True if the account was provisioned by this call

        Raises:
            SupabaseClientError: If the database write fails (left to the
                task runner to retry)
        """
        account = AccountService.get_account(account_id)

        if account is None:
            logger.warning(f"Skipping setup for unknown account: {account_id}")
            return False

        if account.family_id is not None:
            logger.info(f"Account already set up, skipping: {account_id}")
            return False

        local_part = email_local_part(account.email)
        family_name = f"{local_part}'s Family" if local_part else DEFAULT_FAMILY_NAME
        profile_name = (account.name or "").strip() or local_part or DEFAULT_PROFILE_NAME
        color = random.choice(AVATAR_COLORS)

        provisioned = SupabaseClient.provision_account(
            account_id,
            family_name=family_name,
            profile_name=profile_name,
            profile_color=color,
        )

        if provisioned:
            logger.info(f"Provisioned family '{family_name}' and profile '{profile_name}' for account: {account_id}")
        else:
            logger.info(f"Account was set up concurrently, nothing to do: {account_id}")

        return provisioned
