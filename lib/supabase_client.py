# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase operations.
# It implements the singleton pattern to reuse a single service-role client
# and provides specialized methods for:
# - Accounts (the public.accounts row that mirrors each auth user)
# - Profiles scoped to a family
# - Atomic multi-row writes, run as Postgres functions through RPC
# - Supabase Auth sign-in / sign-up / sign-out
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profiles = SupabaseClient.list_family_profiles(family_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows" on .single(), Postgres code for a malformed uuid
NO_ROWS_CODE = "PGRST116"
INVALID_TEXT_CODE = "22P02"


class SupabaseClientError(ApplicationError):
    """Error during Supabase operations."""

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", **kwargs: Any):
        super().__init__(message, code=code, **kwargs)


def _is_missing_row(error: Exception) -> bool:
    text = str(error)
    return NO_ROWS_CODE in text or INVALID_TEXT_CODE in text


class SupabaseClient:
    """
    Typed wrapper for Supabase operations.

    Implements singleton pattern - one service-role client instance is shared
    across the application. All methods are class methods for easy access
    without instantiation.

    Example:
        account = SupabaseClient.fetch_account(user.id)
        if account and account.get("family_id"):
            profiles = SupabaseClient.list_family_profiles(account["family_id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        every query here must scope itself by family or account.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for one auth call.

        Signing in stores the user's session on the client it was called on,
        so auth calls never go through the shared service-role client.
        """
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_account(cls, account_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch an account by ID.

        Returns:
            Account dict (id, email, name, family_id, profile_id, created_at),
            or None if not found
        """
        client = cls.get_client()
        account_id_str = normalize_uuid(account_id)

        try:
            response = (
                client.table("accounts")
                .select("*")
                .eq("id", account_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if _is_missing_row(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch account: {e}",
                code="FETCH_ACCOUNT_FAILED",
                details={"account_id": account_id_str}
            )

    @classmethod
    def insert_account(
        cls,
        account_id: str | UUID,
        email: str,
        name: str | None = None,
    ) -> bool:
        """
        Insert the account row for a new auth user.

        Existing rows are left untouched.

        Returns:
            True if a row was created, False if the account already existed
        """
        client = cls.get_client()
        data = {
            "id": normalize_uuid(account_id),
            "email": email,
            "name": name,
        }

        try:
            response = (
                client.table("accounts")
                .upsert(data, on_conflict="id", ignore_duplicates=True)
                .execute()
            )
            created = bool(response.data)
            logger.debug(f"Account row {data['id']} created={created}")
            return created

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert account: {e}",
                code="INSERT_ACCOUNT_FAILED",
                details={"account_id": data["id"]}
            )

    @classmethod
    def update_account(cls, account_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Patch an account row.

        Returns:
            Updated account dict, or None if no row matched
        """
        client = cls.get_client()
        account_id_str = normalize_uuid(account_id)

        try:
            response = (
                client.table("accounts")
                .update(data)
                .eq("id", account_id_str)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update account: {e}",
                code="UPDATE_ACCOUNT_FAILED",
                details={"account_id": account_id_str, "fields": sorted(data)}
            )

    @classmethod
    def provision_account(
        cls,
        account_id: str | UUID,
        family_name: str,
        profile_name: str,
        profile_color: str,
    ) -> bool:
        """
        Create a family and its first profile and link both to the account.

        Runs the provision_account database function: one transaction that
        does nothing when the account already has a family.

        Returns:
            True if the account was provisioned, False if it already had a family
        """
        client = cls.get_client()
        account_id_str = normalize_uuid(account_id)

        try:
            response = client.rpc("provision_account", {
                "p_account_id": account_id_str,
                "p_family_name": family_name,
                "p_profile_name": profile_name,
                "p_profile_color": profile_color,
            }).execute()
            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to provision account: {e}",
                code="PROVISION_ACCOUNT_FAILED",
                suggestion="Check that migrations in supabase/migrations have been applied",
                details={"account_id": account_id_str}
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, profile_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a profile by ID.

        Returns:
            Profile dict, or None if not found (or the id is not a uuid)
        """
        client = cls.get_client()
        profile_id_str = normalize_uuid(profile_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("id", profile_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if _is_missing_row(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"profile_id": profile_id_str}
            )

    @classmethod
    def list_family_profiles(cls, family_id: str | UUID) -> list[dict[str, Any]]:
        """Fetch every profile in a family, oldest first."""
        client = cls.get_client()
        family_id_str = normalize_uuid(family_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("family_id", family_id_str)
                .order("created_at")
                .execute()
            )
            profiles = response.data or []
            logger.debug(f"Fetched {len(profiles)} profiles for family {family_id_str}")
            return profiles

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list profiles: {e}",
                code="LIST_PROFILES_FAILED",
                details={"family_id": family_id_str}
            )

    @classmethod
    def insert_profile(
        cls,
        family_id: str | UUID,
        name: str,
        color: str,
    ) -> dict[str, Any]:
        """
        Insert a profile. created_at is assigned by the database.

        Returns:
            Inserted profile dict with generated id and created_at
        """
        client = cls.get_client()
        data = {
            "family_id": normalize_uuid(family_id),
            "name": name,
            "color": color,
        }

        try:
            response = (
                client.table("profiles")
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert profile: {e}",
                code="INSERT_PROFILE_FAILED",
                details={"family_id": data["family_id"]}
            )

    @classmethod
    def update_profile(cls, profile_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """Patch a profile row. Returns the updated row, or None if none matched."""
        client = cls.get_client()
        profile_id_str = normalize_uuid(profile_id)

        try:
            response = (
                client.table("profiles")
                .update(data)
                .eq("id", profile_id_str)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"profile_id": profile_id_str}
            )

    @classmethod
    def delete_profile(
        cls,
        profile_id: str | UUID,
        account_id: str | UUID,
    ) -> None:
        """
        Delete a profile, moving the account's selection first if needed.

        Runs the delete_family_profile database function, which locks the
        family, re-checks that another profile survives, points the account
        at the oldest remaining profile if it had this one selected, and
        deletes - in one transaction.

        Raises:
            SupabaseClientError: code LAST_PROFILE or PROFILE_NOT_FOUND when the
                database rejects the delete, otherwise DELETE_PROFILE_FAILED
        """
        client = cls.get_client()
        profile_id_str = normalize_uuid(profile_id)

        try:
            client.rpc("delete_family_profile", {
                "p_profile_id": profile_id_str,
                "p_account_id": normalize_uuid(account_id),
            }).execute()
            logger.info(f"Deleted profile {profile_id_str}")

        except Exception as e:
            text = str(e)
            for code in ("LAST_PROFILE", "PROFILE_NOT_FOUND"):
                if code in text:
                    raise SupabaseClientError(
                        message=f"Delete rejected by database: {code}",
                        code=code,
                        details={"profile_id": profile_id_str}
                    )
            raise SupabaseClientError(
                message=f"Failed to delete profile: {e}",
                code="DELETE_PROFILE_FAILED",
                details={"profile_id": profile_id_str}
            )

    # -------------------------------------------------------------------------
    # Auth (Supabase GoTrue)
    # -------------------------------------------------------------------------
    # Provider errors are raised unchanged: callers pass them through
    # sanitize_auth_error() before anything reaches a user.

    @classmethod
    def sign_in(cls, email: str, password: str) -> Any:
        """Sign in with email + password. Returns the provider's AuthResponse."""
        return cls.get_auth_client().auth.sign_in_with_password({
            "email": email,
            "password": password,
        })

    @classmethod
    def sign_up(cls, email: str, password: str, name: str | None = None) -> Any:
        """Register a new auth user. Returns the provider's AuthResponse."""
        options: dict[str, Any] = {"data": {"name": name}} if name else {}
        return cls.get_auth_client().auth.sign_up({
            "email": email,
            "password": password,
            "options": options,
        })

    @classmethod
    def sign_out(cls, access_token: str) -> None:
        """Revoke the refresh tokens behind an access token."""
        cls.get_client().auth.admin.sign_out(access_token)
