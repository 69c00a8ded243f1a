# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - account.py: Account, Family and gate-state schemas
# - profile.py: Profile schemas and the avatar palette
#
# These models define the "contract" between API and clients.
# =============================================================================

from .account import (
    AccessState,
    Account,
    AuthSession,
    Family,
    RegistrationResult,
)
from .profile import (
    AVATAR_COLORS,
    PROFILE_NAME_MAX_LENGTH,
    Profile,
    ProfileCreate,
    ProfileCreated,
    ProfileList,
    ProfileUpdate,
)

__all__ = [
    # Account
    "AccessState",
    "Account",
    "AuthSession",
    "Family",
    "RegistrationResult",
    # Profile
    "AVATAR_COLORS",
    "PROFILE_NAME_MAX_LENGTH",
    "Profile",
    "ProfileCreate",
    "ProfileCreated",
    "ProfileList",
    "ProfileUpdate",
]
