# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .account_service import AccountService
from .auth_service import AuthService
from .profile_service import ProfileService

__all__ = [
    "AccountService",
    "AuthService",
    "ProfileService",
]
