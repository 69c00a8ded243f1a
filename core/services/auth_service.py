# =============================================================================
# core/services/auth_service.py - Sign-in / Sign-up Business Logic
# =============================================================================
# Wraps Supabase Auth. Every provider failure goes through
# sanitize_auth_error() before it can reach a user; the raw cause only ever
# reaches logs and telemetry.
#
# Signup and sign-in queue setup_new_account for any account that has no
# family yet; the task itself makes sure setup happens once.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.auth_errors import sanitize_auth_error
from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.models.account import AuthSession, RegistrationResult
from core.services.account_service import AccountService
from app.exceptions import AuthenticationFailedError

logger = logging.getLogger(__name__)


def _session_from_response(response: Any) -> AuthSession | None:
    session = getattr(response, "session", None)
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=getattr(session, "expires_in", None),
        token_type=getattr(session, "token_type", None) or "bearer",
    )


class AuthService:
    """Service for authentication operations."""

    @staticmethod
    def authenticate(email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Returns:
            AuthSession with access and refresh tokens

        Raises:
            AuthenticationFailedError: With a sanitized message, whatever the cause
        """
        try:
            response = SupabaseClient.sign_in(email, password)
            session = _session_from_response(response)
            if session is None:
                raise SupabaseClientError(
                    message="Sign-in returned no session",
                    code="NO_SESSION",
                )
        except Exception as e:
            logger.warning(f"Sign-in failed: {type(e).__name__}")
            raise AuthenticationFailedError(sanitize_auth_error(e, "login"), "login") from e

        logger.info("Sign-in succeeded")

        user = getattr(response, "user", None)
        if user is not None:
            AccountService.ensure_account_setup(str(user.id))

        return session

    @staticmethod
    def register(email: str, password: str, name: str | None = None) -> RegistrationResult:
        """
        Create an account and schedule its family/profile setup.

        Returns:
            RegistrationResult with the account id, tokens (None when email
            confirmation is required) and the setup task id

        Raises:
            AuthenticationFailedError: With a sanitized message, whatever the cause
        """
        try:
            response = SupabaseClient.sign_up(email, password, name)
            user = getattr(response, "user", None)

            if user is None:
                raise SupabaseClientError(
                    message="Sign-up returned no user",
                    code="NO_USER",
                )

            # With email confirmation on, a repeat signup comes back as a
            # user without identities instead of an error
            if getattr(user, "identities", None) == []:
                raise SupabaseClientError(
                    message="User already exists",
                    code="USER_EXISTS",
                )

            account_id = UUID(str(user.id))
            SupabaseClient.insert_account(
                account_id,
                email=getattr(user, "email", None) or email,
                name=name,
            )

        except Exception as e:
            logger.warning(f"Sign-up failed: {type(e).__name__}")
            raise AuthenticationFailedError(sanitize_auth_error(e, "signup"), "signup") from e

        # The account exists from here on; a failed enqueue is retried on sign-in
        setup_task_id = AccountService.ensure_account_setup(account_id)

        logger.info(f"Registered account: {account_id}")
        return RegistrationResult(
            account_id=account_id,
            session=_session_from_response(response),
            setup_task_id=setup_task_id,
        )

    @staticmethod
    def sign_out(access_token: str) -> None:
        """Revoke the session behind an access token."""
        SupabaseClient.sign_out(access_token)
        logger.info("Signed out")
