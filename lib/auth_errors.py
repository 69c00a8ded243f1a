# =============================================================================
# lib/auth_errors.py - Authentication Error Sanitizer
# =============================================================================
# Turns raw sign-in / sign-up failures into one of a few fixed, user-safe
# messages, and ships the raw failure to telemetry.
#
# Wrong password and unknown account both map to "Invalid email or password".
# Never add a message that tells those two apart: it lets anyone test which
# emails have accounts.
#
# Usage:
#   from lib.auth_errors import sanitize_auth_error
#   raise AuthenticationFailedError(sanitize_auth_error(e, "login"), "login")
# =============================================================================

import logging
import traceback
from typing import Literal

from lib import telemetry

logger = logging.getLogger(__name__)

AuthContext = Literal["login", "signup"]

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_EXISTS = "An account with this email already exists"
CONNECTION_FAILED = "Unable to connect. Please check your internet connection."
RATE_LIMITED = "Too many attempts. Please try again later."

GENERIC_LOGIN_ERROR = "Unable to sign in. Please try again."
GENERIC_SIGNUP_ERROR = "Unable to create account. Please try again."

# Ordered (substring, safe message) pairs, matched against the lower-cased raw
# message. First match wins.
AUTH_ERROR_PATTERNS: tuple[tuple[str, str], ...] = (
    # Login errors
    ("invalid credentials", INVALID_CREDENTIALS),
    ("invalid password", INVALID_CREDENTIALS),
    ("user not found", INVALID_CREDENTIALS),
    ("account not found", INVALID_CREDENTIALS),
    ("incorrect password", INVALID_CREDENTIALS),
    ("invalid login credentials", INVALID_CREDENTIALS),  # Supabase Auth wording

    # Signup errors
    ("email already exists", ACCOUNT_EXISTS),
    ("email already in use", ACCOUNT_EXISTS),
    ("user already exists", ACCOUNT_EXISTS),
    ("user already registered", ACCOUNT_EXISTS),  # Supabase Auth wording

    # Network errors
    ("network error", CONNECTION_FAILED),
    ("fetch failed", CONNECTION_FAILED),
    ("failed to fetch", CONNECTION_FAILED),

    # Rate limiting
    ("too many requests", RATE_LIMITED),
    ("rate limit", RATE_LIMITED),
)

SAFE_MESSAGES = frozenset(
    {message for _, message in AUTH_ERROR_PATTERNS}
    | {GENERIC_LOGIN_ERROR, GENERIC_SIGNUP_ERROR}
)


def _raw_message(error: object) -> str:
    """Best-effort text of whatever the auth layer raised or returned."""
    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
    return str(error)


def sanitize_auth_error(error: object, context: AuthContext) -> str:
    """
    Map an authentication failure to a safe, user-facing message.

    Accepts exceptions and any other value (strings, dicts, None); the value
    is coerced to text and never causes this function to raise.

    Args:
        error: The original failure from the auth provider
        context: "login" or "signup" - picks the generic fallback message

    Returns:
        One of the fixed messages in SAFE_MESSAGES
    """
    original_message = _raw_message(error)
    lower_message = original_message.lower()

    safe_message = None
    for pattern, safe in AUTH_ERROR_PATTERNS:
        if pattern in lower_message:
            safe_message = safe
            break

    if safe_message is None:
        safe_message = GENERIC_LOGIN_ERROR if context == "login" else GENERIC_SIGNUP_ERROR

    telemetry.capture("auth_error", {
        "context": context,
        "sanitized_message": safe_message,
        "original_message": original_message,
        "error_type": type(error).__name__,
    })

    if isinstance(error, BaseException):
        telemetry.capture("auth_exception", {
            "exception_message": original_message,
            "exception_type": type(error).__name__,
            "exception_stack_trace_raw": "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
            "context": context,
        })

    logger.debug(f"Sanitized {context} error ({type(error).__name__}) -> {safe_message!r}")
    return safe_message
