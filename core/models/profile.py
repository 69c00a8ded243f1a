# =============================================================================
# core/models/profile.py - Profile Schemas
# =============================================================================
# These models define the API contract for profile operations:
# - Profile: A named, colored persona inside a family
# - ProfileCreate / ProfileUpdate: Validated input for the profile form
# - AVATAR_COLORS: The fixed avatar palette, shared by validation and
#   account provisioning
#
# A family always owns at least one profile. Each account points at exactly
# one selected profile (or none, while the profile picker is showing).
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


# Default avatar colors for profile selection
AVATAR_COLORS: tuple[str, ...] = (
    "#EF4444",  # Red
    "#F97316",  # Orange
    "#EAB308",  # Yellow
    "#22C55E",  # Green
    "#14B8A6",  # Teal
    "#3B82F6",  # Blue
    "#8B5CF6",  # Violet
    "#EC4899",  # Pink
)

PROFILE_NAME_MAX_LENGTH = 50


def _clean_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("Name is required")
    if len(name) > PROFILE_NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {PROFILE_NAME_MAX_LENGTH} characters")
    return name


def _clean_color(value: str) -> str:
    color = value.strip().upper()
    if color not in AVATAR_COLORS:
        raise ValueError("Color must be one of the avatar palette colors")
    return color


class Profile(BaseModel):
    """
    A profile as stored in public.profiles.

    Example:
        {
            "id": "660e8400-e29b-41d4-a716-446655440001",
            "family_id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Sam",
            "color": "#3B82F6",
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    id: UUID = Field(..., description="Unique profile identifier")
    family_id: UUID = Field(..., description="Family that owns this profile")
    name: str = Field(..., description="Display name")
    color: str = Field(..., description="Avatar color from the palette")
    created_at: datetime | None = Field(
        default=None,
        description="Timestamp assigned by the database on insert"
    )

    model_config = {"from_attributes": True}


class ProfileCreate(BaseModel):
    """
    Input for creating a profile.

    The name is trimmed; blank names and names over 50 characters are
    rejected, as is any color outside the palette.
    """

    name: str = Field(..., examples=["Sam"])
    color: str = Field(..., examples=["#3B82F6"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _clean_color(value)


class ProfileUpdate(BaseModel):
    """Input for editing a profile. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, examples=["Sam"])
    color: str | None = Field(default=None, examples=["#22C55E"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else _clean_name(value)

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return None if value is None else _clean_color(value)


class ProfileCreated(BaseModel):
    """Response for POST /profiles."""

    profile_id: UUID


class ProfileList(BaseModel):
    """Response for GET /profiles. No ordering guarantee."""

    profiles: list[Profile]
