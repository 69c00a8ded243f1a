# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for sign-in, sign-up, sign-out and the current account.
#
# Sign-in and sign-up failures always come back as one of a few fixed
# messages (see lib/auth_errors.py); the provider's own error text is never
# returned.
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import (
    get_access_token,
    get_current_user,
    get_current_user_optional,
)
from app.auth.models import (
    AccessStateResponse,
    AccountResponse,
    AuthUser,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from core.models.account import AccessState
from core.services.account_service import AccountService
from core.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """
    Sign in with email and password.

    Returns:
        LoginResponse: Access and refresh tokens

    Raises:
        401: "Invalid email or password" or another sanitized message
    """
    session = AuthService.authenticate(request.email, request.password)
    return LoginResponse(**session.model_dump())


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest) -> SignupResponse:
    """
    Create an account.

    The account's family and first profile are created by a background
    task; poll GET /auth/state until it reports needs_profile or ready.

    Raises:
        400: Sanitized signup failure
        422: Form validation failure (short password, mismatch)
    """
    result = AuthService.register(request.email, request.password, request.name)
    return SignupResponse(
        account_id=result.account_id,
        session=result.session,
        setup_task_id=result.setup_task_id,
        message=(
            "Account created successfully"
            if result.session
            else "Account created. Check your email to confirm it before signing in."
        ),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    user: AuthUser = Depends(get_current_user),
    access_token: str = Depends(get_access_token),
) -> None:
    """Revoke the current session."""
    AuthService.sign_out(access_token)
    logger.info(f"Account {user.id} signed out")


@router.get("/me", response_model=Optional[AccountResponse])
async def get_current_account(
    user: Optional[AuthUser] = Depends(get_current_user_optional)
) -> Optional[AccountResponse]:
    """
    Get the signed-in account, or null.

    Also null while the account row has not been written yet.
    """
    account = AccountService.get_account(user.id if user else None)
    if account is None:
        return None

    return AccountResponse(
        id=account.id,
        email=account.email,
        name=account.name,
        family_id=account.family_id,
        profile_id=account.profile_id,
        needs_profile=account.needs_profile,
    )


@router.get("/state", response_model=AccessStateResponse)
async def get_access_state(
    user: Optional[AuthUser] = Depends(get_current_user_optional)
) -> AccessStateResponse:
    """
    Report the caller's position in the sign-in -> pick-profile gate.

    Clients show the login page for unauthenticated, a spinner for
    provisioning, the profile picker for needs_profile, and the app for ready.
    While provisioning, account setup is queued again in case the signup
    enqueue was lost.
    """
    state = AccountService.get_access_state(user.id if user else None)
    if state == AccessState.PROVISIONING:
        AccountService.ensure_account_setup(user.id)

    return AccessStateResponse(
        state=state,
        authenticated=state != AccessState.UNAUTHENTICATED,
        profile_selected=state == AccessState.READY,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
