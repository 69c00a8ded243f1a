# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Rejections carry a safe, user-facing message. Raw data-store or auth-provider
# text never reaches a response body; only the auth error sanitizer may turn
# a raw failure into user-facing text.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class MealPlannerException(Exception):
    """
    Base exception for the Meal Planner API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEALPLANNER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authentication Exceptions
# =============================================================================

class NotAuthenticatedError(MealPlannerException):
    """Raised when an operation needs a signed-in account."""

    def __init__(self):
        super().__init__(
            message="Not authenticated",
            code="NOT_AUTHENTICATED",
            status_code=401,
            suggestion="Sign in and retry with a valid Bearer token",
        )


class AuthenticationFailedError(MealPlannerException):
    """
    Raised when sign-in or sign-up fails.

    The message is always the output of sanitize_auth_error(), never the
    provider's own text.
    """

    def __init__(self, safe_message: str, context: str):
        super().__init__(
            message=safe_message,
            code="LOGIN_FAILED" if context == "login" else "SIGNUP_FAILED",
            status_code=401 if context == "login" else 400,
        )
        self.context = context


# =============================================================================
# Profile Exceptions
# =============================================================================

class NoFamilyError(MealPlannerException):
    """Raised when the acting account has not been linked to a family yet."""

    def __init__(self):
        super().__init__(
            message="User has no family",
            code="NO_FAMILY",
            status_code=409,
            suggestion="Account setup may still be running; retry in a few seconds",
        )


class ProfileNotFoundError(MealPlannerException):
    """
    Raised when a profile does not exist or belongs to another family.

    Both cases share one message so callers can't probe for profile ids.
    """

    def __init__(self):
        super().__init__(
            message="Profile not found in your family",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Pick one of the profiles returned by GET /profiles",
        )


class LastProfileError(MealPlannerException):
    """Raised when deleting the only remaining profile of a family."""

    def __init__(self):
        super().__init__(
            message="Cannot delete the last profile in a family",
            code="LAST_PROFILE",
            status_code=409,
            suggestion="Create another profile before deleting this one",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def mealplanner_exception_handler(
    request: Request,
    exc: MealPlannerException
) -> JSONResponse:
    """
    Convert MealPlannerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Only field locations and messages are returned. Submitted values are
    dropped so passwords never echo back.
    """
    errors = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append({"field": field, "message": message})

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors[0]["message"] if errors else "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
