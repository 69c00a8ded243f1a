# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data and the login/signup forms.
#
# Form rules match the web client so a bypassed client still gets the same
# messages: password of at least 8 characters, confirmation must match.
# =============================================================================

from uuid import UUID
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.models.account import AccessState, AuthSession

PASSWORD_MIN_LENGTH = 8


def _clean_email(value: str) -> str:
    email = value.strip().lower()
    if "@" not in email:
        raise ValueError("Enter a valid email address")
    return email


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    model_config = {"frozen": True}


# =============================================================================
# Requests
# =============================================================================

class LoginRequest(BaseModel):
    """Credentials for POST /auth/login."""
    email: str = Field(..., examples=["sam@example.com"])
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _clean_email(value)


class SignupRequest(BaseModel):
    """Details for POST /auth/signup."""
    name: Optional[str] = Field(default=None, max_length=100, examples=["Sam"])
    email: str = Field(..., examples=["sam@example.com"])
    password: str
    confirm_password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _clean_email(value)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return value

    @model_validator(mode="after")
    def check_passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


# =============================================================================
# Responses
# =============================================================================

class LoginResponse(AuthSession):
    """Tokens returned by a successful sign-in."""


class SignupResponse(BaseModel):
    """
    Result of a successful signup.

    session is null when the account must confirm its email first.
    """
    account_id: UUID
    session: Optional[AuthSession] = None
    setup_task_id: Optional[str] = None
    message: str = "Account created successfully"


class AccountResponse(BaseModel):
    """The signed-in account, as returned by GET /auth/me."""
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    family_id: Optional[UUID] = None
    profile_id: Optional[UUID] = None
    needs_profile: bool = True


class AccessStateResponse(BaseModel):
    """Where the caller stands in the sign-in -> pick-profile gate."""
    state: AccessState
    authenticated: bool
    profile_selected: bool
