# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Meal Planner API:
# - test_auth_errors.py: Auth error sanitizer and its telemetry
# - test_models.py: Unit tests for Pydantic model validation
# - test_account_service.py: Account setup task and gate state
# - test_profile_service.py: Family-scoped profile operations
# - test_auth_service.py: Sign-in / sign-up flows
# - test_routes.py: API endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
