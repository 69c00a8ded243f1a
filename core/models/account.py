# =============================================================================
# core/models/account.py - Account & Family Schemas
# =============================================================================
# - Account: the public.accounts row mirroring each Supabase auth user,
#   linked to at most one family and at most one selected profile
# - Family: a household grouping that owns the profiles
# - AccessState: where an account stands in the sign-in -> pick-profile gate
# - AuthSession / RegistrationResult: what the auth service hands back
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class AccessState(str, Enum):
    """
    Position of the caller in the two-stage gate.

    - unauthenticated: no valid session
    - provisioning: signed in, account setup task has not linked a family yet
    - needs_profile: signed in with a family, no profile selected
    - ready: signed in with a selected profile; app content may render
    """
    UNAUTHENTICATED = "unauthenticated"
    PROVISIONING = "provisioning"
    NEEDS_PROFILE = "needs_profile"
    READY = "ready"


class Family(BaseModel):
    """A household grouping as stored in public.families."""

    id: UUID
    name: str
    created_at: datetime | None = None


class Account(BaseModel):
    """
    An account as stored in public.accounts.

    id matches the Supabase auth user id. profile_id is the current
    selection: a nullable reference, not ownership.
    """

    id: UUID = Field(..., description="Auth user id")
    email: str | None = Field(default=None)
    name: str | None = Field(default=None, description="Display name given at signup")
    family_id: UUID | None = Field(default=None)
    profile_id: UUID | None = Field(default=None, description="Currently selected profile")
    created_at: datetime | None = Field(default=None)

    model_config = {"from_attributes": True}

    @property
    def needs_profile(self) -> bool:
        return self.profile_id is None


class AuthSession(BaseModel):
    """Tokens issued by Supabase Auth for a signed-in account."""

    access_token: str
    refresh_token: str
    expires_in: int | None = None
    token_type: str = "bearer"


class RegistrationResult(BaseModel):
    """
    Outcome of a successful signup.

    session is None when the project requires email confirmation before
    the first sign-in.
    """

    account_id: UUID
    session: AuthSession | None = None
    setup_task_id: str | None = Field(
        default=None,
        description="Celery task id of the account setup job"
    )
