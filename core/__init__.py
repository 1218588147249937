# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for users, cards and clicks
# - services/: Supabase-backed operations (auth, profiles, cards, clicks, storage)
# - policy.py: What each plan may do
# - analytics.py: Click aggregation
# - links.py / vcard.py: Share URLs, card actions and contact export
# - state.py / store.py: Session state and the store that owns it
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
