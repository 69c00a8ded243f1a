# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: an in-memory stand-in for lib.supabase_client.SupabaseClient
#   that the services are patched to use
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from lib.supabase_client import SupabaseClientError


# =============================================================================
# In-memory Supabase
# =============================================================================

class FakeSupabase:
    """
    Dict-backed implementation of the SupabaseClient data methods.

    Mirrors the database functions too: provision_account skips accounts
    that already have a family, delete_family_profile refuses the last
    profile and moves the selection to the oldest remaining profile.
    """

    def __init__(self):
        self.families: dict[str, dict] = {}
        self.profiles: dict[str, dict] = {}
        self.accounts: dict[str, dict] = {}
        self.provision_calls = 0

    # -- seeding helpers ------------------------------------------------------

    def add_family(self, name="Test Family") -> str:
        family_id = str(uuid4())
        self.families[family_id] = {
            "id": family_id,
            "name": name,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return family_id

    def add_profile(self, family_id, name="Profile", color="#3B82F6") -> str:
        return self.insert_profile(family_id, name, color)["id"]

    def add_account(self, email="sam@example.com", name=None, family_id=None, profile_id=None) -> str:
        account_id = str(uuid4())
        self.accounts[account_id] = {
            "id": account_id,
            "email": email,
            "name": name,
            "family_id": family_id,
            "profile_id": profile_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return account_id

    def family_profiles(self, family_id) -> list[dict]:
        return [p for p in self.profiles.values() if p["family_id"] == str(family_id)]

    # -- accounts -------------------------------------------------------------

    def fetch_account(self, account_id):
        row = self.accounts.get(str(account_id))
        return dict(row) if row else None

    def insert_account(self, account_id, email, name=None) -> bool:
        if str(account_id) in self.accounts:
            return False
        self.accounts[str(account_id)] = {
            "id": str(account_id),
            "email": email,
            "name": name,
            "family_id": None,
            "profile_id": None,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return True

    def update_account(self, account_id, data):
        row = self.accounts.get(str(account_id))
        if row is None:
            return None
        row.update(data)
        return dict(row)

    def provision_account(self, account_id, family_name, profile_name, profile_color) -> bool:
        self.provision_calls += 1
        row = self.accounts.get(str(account_id))
        if row is None or row["family_id"] is not None:
            return False
        family_id = self.add_family(family_name)
        profile_id = self.add_profile(family_id, profile_name, profile_color)
        row.update({"family_id": family_id, "profile_id": profile_id})
        return True

    # -- profiles -------------------------------------------------------------

    def fetch_profile(self, profile_id):
        row = self.profiles.get(str(profile_id))
        return dict(row) if row else None

    def list_family_profiles(self, family_id):
        return [dict(p) for p in self.family_profiles(family_id)]

    def insert_profile(self, family_id, name, color):
        profile_id = str(uuid4())
        self.profiles[profile_id] = {
            "id": profile_id,
            "family_id": str(family_id),
            "name": name,
            "color": color,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return dict(self.profiles[profile_id])

    def update_profile(self, profile_id, data):
        row = self.profiles.get(str(profile_id))
        if row is None:
            return None
        row.update(data)
        return dict(row)

    def delete_profile(self, profile_id, account_id):
        profile = self.profiles.get(str(profile_id))
        if profile is None:
            raise SupabaseClientError("Delete rejected by database: PROFILE_NOT_FOUND", code="PROFILE_NOT_FOUND")
        siblings = self.family_profiles(profile["family_id"])
        if len(siblings) <= 1:
            raise SupabaseClientError("Delete rejected by database: LAST_PROFILE", code="LAST_PROFILE")

        # oldest remaining profile, as in delete_family_profile
        replacement = next(p["id"] for p in siblings if p["id"] != str(profile_id))
        account = self.accounts.get(str(account_id))
        if account and account["profile_id"] == str(profile_id):
            account["profile_id"] = replacement

        del self.profiles[str(profile_id)]
        # on delete set null
        for row in self.accounts.values():
            if row["profile_id"] == str(profile_id):
                row["profile_id"] = None


SERVICE_MODULES = (
    "core.services.account_service",
    "core.services.profile_service",
    "core.services.auth_service",
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store(monkeypatch):
    """FakeSupabase wired into every service module."""
    fake = FakeSupabase()
    for module in SERVICE_MODULES:
        monkeypatch.setattr(f"{module}.SupabaseClient", fake)
    return fake


@pytest.fixture
def family_with_two_profiles(store):
    """Account A in family F1 with profiles P1 (selected) and P2."""
    family_id = store.add_family("Sam's Family")
    p1 = store.add_profile(family_id, "Sam", "#EF4444")
    p2 = store.add_profile(family_id, "Alex", "#22C55E")
    account_id = store.add_account("sam@example.com", family_id=family_id, profile_id=p1)
    return {"account_id": account_id, "family_id": family_id, "p1": p1, "p2": p2}


@pytest.fixture
def other_family(store):
    """Family F2 with a single profile P3 and its own account."""
    family_id = store.add_family("Other Family")
    p3 = store.add_profile(family_id, "Jordan", "#8B5CF6")
    account_id = store.add_account("jordan@example.com", family_id=family_id, profile_id=p3)
    return {"account_id": account_id, "family_id": family_id, "p3": p3}
