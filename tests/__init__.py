# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Unit tests for the pure core (policy, analytics, links, vCard, models,
# state), service tests against a mocked Supabase client, store tests with
# mocked services, and API tests through FastAPI's TestClient.
#
# Run tests with: pytest
# =============================================================================
