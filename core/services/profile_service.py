# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Handles profile CRUD and selection for the acting account's family.
#
# Rules:
# - An account only sees and touches profiles of its own family. A profile
#   in another family is reported exactly like a missing one.
# - A family always keeps at least one profile.
# - Deleting the account's selected profile moves the selection to another
#   profile of the family in the same transaction.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.models.account import Account
from core.models.profile import Profile
from core.services.account_service import AccountService
from app.exceptions import (
    LastProfileError,
    NoFamilyError,
    NotAuthenticatedError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Service for profile management operations.

    Every method takes the acting account id, or None for an
    unauthenticated caller.
    """

    @staticmethod
    def _require_family(account_id: UUID | str | None) -> Account:
        """
        Resolve the acting account and make sure it belongs to a family.

        Raises:
            NotAuthenticatedError: If account_id is None
            NoFamilyError: If the account has no family (or no row yet)
        """
        if account_id is None:
            raise NotAuthenticatedError()

        account = AccountService.get_account(account_id)
        if account is None or account.family_id is None:
            raise NoFamilyError()

        return account

    @staticmethod
    def _get_owned_profile(account: Account, profile_id: UUID | str) -> dict:
        """
        Fetch a profile that belongs to the account's family.

        Raises:
            ProfileNotFoundError: If it doesn't exist or belongs to another family
        """
        profile = SupabaseClient.fetch_profile(profile_id)

        if not profile or str(profile.get("family_id")) != str(account.family_id):
            # Don't reveal that the profile exists - return not found
            raise ProfileNotFoundError()

        return profile

    @staticmethod
    def list_profiles(account_id: UUID | str | None) -> list[Profile]:
        """
        List the profiles of the account's family.

        Returns an empty list when unauthenticated or without a family.
        Callers must not rely on the order.
        """
        if account_id is None:
            return []

        account = AccountService.get_account(account_id)
        if account is None or account.family_id is None:
            return []

        rows = SupabaseClient.list_family_profiles(account.family_id)
        return [Profile(**row) for row in rows]

    @staticmethod
    def get_current_profile(account_id: UUID | str | None) -> Profile | None:
        """Get the account's selected profile, if any."""
        account = AccountService.get_account(account_id)
        if account is None or account.family_id is None or account.profile_id is None:
            return None

        row = SupabaseClient.fetch_profile(account.profile_id)
        return Profile(**row) if row else None

    @staticmethod
    def select_profile(account_id: UUID | str | None, profile_id: UUID | str) -> bool:
        """
        Make a profile of the account's family the current selection.

        Raises:
            NotAuthenticatedError, NoFamilyError, ProfileNotFoundError
        """
        account = ProfileService._require_family(account_id)
        profile = ProfileService._get_owned_profile(account, profile_id)

        SupabaseClient.update_account(account.id, {"profile_id": str(profile["id"])})
        logger.info(f"Account {account.id} selected profile {profile['id']}")
        return True

    @staticmethod
    def create_profile(account_id: UUID | str | None, name: str, color: str) -> UUID:
        """
        Add a profile to the account's family.

        Returns:
            The new profile's id

        Raises:
            NotAuthenticatedError, NoFamilyError
        """
        account = ProfileService._require_family(account_id)

        row = SupabaseClient.insert_profile(account.family_id, name=name, color=color)
        logger.info(f"Created profile {row['id']} in family {account.family_id}")
        return UUID(str(row["id"]))

    @staticmethod
    def update_profile(
        account_id: UUID | str | None,
        profile_id: UUID | str,
        name: str | None = None,
        color: str | None = None,
    ) -> bool:
        """
        Rename or recolor a profile. Only supplied fields are changed.

        Raises:
            NotAuthenticatedError, NoFamilyError, ProfileNotFoundError
        """
        account = ProfileService._require_family(account_id)
        profile = ProfileService._get_owned_profile(account, profile_id)

        update_data = {}
        if name is not None:
            update_data["name"] = name
        if color is not None:
            update_data["color"] = color

        if not update_data:
            return True  # Nothing to update

        SupabaseClient.update_profile(profile["id"], update_data)
        logger.info(f"Updated profile {profile['id']}: {sorted(update_data)}")
        return True

    @staticmethod
    def delete_profile(account_id: UUID | str | None, profile_id: UUID | str) -> bool:
        """
        Delete a profile of the account's family.

        If it is the account's current selection, the selection moves to
        another profile of the family. The selection change and the delete
        commit together or not at all.

        Raises:
            NotAuthenticatedError, NoFamilyError, ProfileNotFoundError,
            LastProfileError
        """
        account = ProfileService._require_family(account_id)
        profile = ProfileService._get_owned_profile(account, profile_id)
        profile_id_str = str(profile["id"])

        family_profiles = SupabaseClient.list_family_profiles(account.family_id)
        if len(family_profiles) <= 1:
            raise LastProfileError()

        try:
            # The database re-checks both rules and picks the replacement
            # selection under the family lock
            SupabaseClient.delete_profile(profile_id_str, account_id=account.id)
        except SupabaseClientError as e:
            if e.code == "LAST_PROFILE":
                raise LastProfileError() from e
            if e.code == "PROFILE_NOT_FOUND":
                raise ProfileNotFoundError() from e
            raise

        logger.info(f"Account {account.id} deleted profile {profile_id_str}")
        return True
