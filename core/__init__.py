# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the meal planner's business logic:
# - models/: Pydantic schemas for accounts, families and profiles
# - services/: Account setup, profile directory and auth services
#
# Services talk to Supabase only through lib.supabase_client, so tests can
# swap the data layer out with a single patch.
# =============================================================================
