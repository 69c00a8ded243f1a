# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database and auth calls
# - auth_errors.py: Maps raw auth failures to safe user-facing messages
# - telemetry.py: Diagnostic event capture (logs + Redis pub/sub)
# - utils.py: Shared utilities (error base class, UUID/email helpers)
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.auth_errors import sanitize_auth_error
from lib.utils import ApplicationError, email_local_part, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Auth errors
    "sanitize_auth_error",
    # Utils
    "ApplicationError",
    "email_local_part",
    "normalize_uuid",
]
