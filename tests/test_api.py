# =============================================================================
# tests/test_api.py - API Endpoint Tests
# =============================================================================
# Exercises the routers through FastAPI's TestClient. Authentication and
# the session store are replaced with dependency overrides; Supabase-backed
# services used directly by routers are patched.
# =============================================================================

from unittest.mock import patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.dependencies import get_session_store, new_session_store
from app.main import app
from core.models.click import Click
from core.models.user import UserTier
from core.store import SessionStore
from tests.conftest import CARD_ID, NOW, SESSION, USER_ID


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(make_store):
    """Sign the test client in with a store of the given tier and cards."""
    def _sign_in(tier: UserTier = UserTier.FREE, cards=()):
        store = make_store(tier, cards)
        app.dependency_overrides[get_current_user] = lambda: AuthUser(
            id=UUID(USER_ID), email="ada@example.com", access_token="token"
        )
        app.dependency_overrides[get_session_store] = lambda: store
        return store
    return _sign_in


# =============================================================================
# Root / Health Tests
# =============================================================================

class TestRoot:
    """Test root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "LoopCard API"

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"


# =============================================================================
# Auth Tests
# =============================================================================

class TestAuthRoutes:
    """Test /api/v1/auth endpoints."""

    def test_cards_require_token(self, client):
        assert client.get("/api/v1/cards").status_code in (401, 403)

    def test_me(self, client, signed_in):
        signed_in(UserTier.PRO)

        response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == USER_ID
        assert data["tier"] == "Pro"
        assert data["capabilities"]["can_use_ai_features"] is True

    def test_login(self, client, services, make_profile):
        services["auth"].sign_in.return_value = SESSION
        services["profiles"].get_profile.return_value = make_profile()
        services["cards"].list_cards.return_value = []
        app.dependency_overrides[new_session_store] = lambda: SessionStore(**services)

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ada@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == USER_ID
        assert response.json()["access_token"] == "token"

    def test_login_without_profile(self, client, services):
        services["auth"].sign_in.return_value = SESSION
        services["profiles"].get_profile.return_value = None
        app.dependency_overrides[new_session_store] = lambda: SessionStore(**services)

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ada@example.com", "password": "secret123"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "PROFILE_NOT_FOUND"

    def test_login_rejects_short_password(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ada@example.com", "password": "123"},
        )

        assert response.status_code == 422

    def test_change_tier(self, client, signed_in, services, make_profile):
        signed_in(UserTier.FREE)
        services["profiles"].update_tier.return_value = make_profile(UserTier.PRO)

        response = client.patch("/api/v1/auth/me/tier", json={"tier": "Pro"})

        assert response.status_code == 200
        assert response.json()["tier"] == "Pro"


# =============================================================================
# Card Tests
# =============================================================================

class TestCardRoutes:
    """Test /api/v1/cards endpoints."""

    def test_list_cards(self, client, signed_in, card, services):
        signed_in(UserTier.FREE, cards=[card])
        services["cards"].find_unlinked_cards.return_value = []

        response = client.get("/api/v1/cards")

        assert response.status_code == 200
        data = response.json()
        assert [c["id"] for c in data["cards"]] == [CARD_ID]
        assert data["capabilities"]["max_cards"] == 2
        assert data["capabilities"]["can_create_card"] is True

    def test_create_card(self, client, signed_in, services, unlinked_card):
        signed_in(UserTier.PRO)
        services["cards"].create_card.return_value = unlinked_card

        response = client.post("/api/v1/cards", json={"full_name": "Ada Lovelace"})

        assert response.status_code == 201
        assert response.json()["id"] == unlinked_card.id

    def test_create_card_blank_name(self, client, signed_in, services):
        signed_in(UserTier.PRO)

        response = client.post("/api/v1/cards", json={"full_name": " "})

        assert response.status_code == 422
        services["cards"].create_card.assert_not_called()

    def test_create_card_over_limit(self, client, signed_in, card, unlinked_card):
        signed_in(UserTier.FREE, cards=[card, unlinked_card])

        response = client.post("/api/v1/cards", json={"full_name": "Third"})

        assert response.status_code == 403
        assert response.json()["code"] == "CARD_LIMIT_REACHED"

    def test_get_unknown_card(self, client, signed_in):
        signed_in(UserTier.PRO)

        response = client.get(f"/api/v1/cards/{CARD_ID}")

        assert response.status_code == 404
        assert response.json()["code"] == "CARD_NOT_FOUND"

    def test_update_card(self, client, signed_in, services, card):
        signed_in(UserTier.PRO, cards=[card])
        services["cards"].update_card.side_effect = lambda c: c

        response = client.put(f"/api/v1/cards/{CARD_ID}", json={"full_name": "Augusta Ada"})

        assert response.status_code == 200
        assert response.json()["full_name"] == "Augusta Ada"
        assert response.json()["qr_code_url"] == card.qr_code_url

    def test_delete_card(self, client, signed_in, services, card):
        signed_in(UserTier.PRO, cards=[card])

        response = client.delete(f"/api/v1/cards/{CARD_ID}")

        assert response.status_code == 204
        services["cards"].delete_card.assert_called_once_with(CARD_ID)

    def test_supabase_failure_is_bad_gateway(self, client, signed_in, services, card):
        from lib.supabase_client import SupabaseClientError
        signed_in(UserTier.PRO, cards=[card])
        services["cards"].delete_card.side_effect = SupabaseClientError("down", code="DELETE_CARD_FAILED")

        response = client.delete(f"/api/v1/cards/{CARD_ID}")

        assert response.status_code == 502
        assert response.json()["code"] == "DELETE_CARD_FAILED"

    def test_share(self, client, signed_in, card):
        signed_in(UserTier.FREE, cards=[card])

        response = client.get(f"/api/v1/cards/{CARD_ID}/share")

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == f"https://loopcard.test/#/card/{CARD_ID}"
        assert data["link_state"] == "qr_linked"


# =============================================================================
# Analytics Tests
# =============================================================================

def _clicks():
    return [
        Click(card_id=CARD_ID, type="phone", created_at=NOW),
        Click(card_id=CARD_ID, type="phone", created_at=NOW),
        Click(card_id=CARD_ID, type="email", created_at=NOW),
    ]


class TestAnalyticsRoutes:
    """Test analytics and insights endpoints."""

    @patch("app.routers.analytics.ClickService")
    def test_free_sees_total_only(self, mock_clicks, client, signed_in, card):
        signed_in(UserTier.FREE, cards=[card])
        mock_clicks.list_clicks.return_value = _clicks()

        response = client.get(f"/api/v1/cards/{CARD_ID}/analytics?window=all")

        data = response.json()
        assert response.status_code == 200
        assert data["total_clicks"] == 3
        assert data["advanced"] is False
        assert data["by_type"] == []
        assert data["upsell_hint"]

    @patch("app.routers.analytics.ClickService")
    def test_pro_sees_breakdown(self, mock_clicks, client, signed_in, card):
        signed_in(UserTier.PRO, cards=[card])
        mock_clicks.list_clicks.return_value = _clicks()

        response = client.get(f"/api/v1/cards/{CARD_ID}/analytics?window=all")

        data = response.json()
        assert data["advanced"] is True
        assert data["window_days"] is None
        assert data["by_type"] == [{"name": "Phone", "count": 2}, {"name": "Email", "count": 1}]

    def test_invalid_window(self, client, signed_in, card):
        signed_in(UserTier.PRO, cards=[card])

        response = client.get(f"/api/v1/cards/{CARD_ID}/analytics?window=45")

        assert response.status_code == 422

    def test_insights_are_pro_only(self, client, signed_in, card):
        signed_in(UserTier.SMALL_BUSINESS, cards=[card])

        response = client.post(f"/api/v1/cards/{CARD_ID}/analytics/insights", json={})

        assert response.status_code == 403
        assert response.json()["code"] == "FEATURE_NOT_AVAILABLE"

    @patch("app.routers.analytics.generate_analytics_insights")
    @patch("app.routers.analytics.ClickService")
    def test_insights(self, mock_clicks, mock_generate, client, signed_in, card):
        signed_in(UserTier.PRO, cards=[card])
        mock_clicks.list_clicks.return_value = _clicks()
        mock_generate.return_value = "## Overall Performance"

        response = client.post(f"/api/v1/cards/{CARD_ID}/analytics/insights", json={"window": "7"})

        assert response.status_code == 200
        assert response.json()["insights"] == "## Overall Performance"
        assert mock_generate.call_args.kwargs["card_name"] == "Ada Lovelace"


class TestSuggestionRoutes:
    """Test username suggestions."""

    def test_free_is_refused(self, client, signed_in):
        signed_in(UserTier.FREE)

        response = client.post(
            "/api/v1/suggestions/usernames",
            json={"full_name": "Ada", "platform": "github"},
        )

        assert response.status_code == 403

    @patch("app.routers.suggestions.suggest_usernames")
    def test_pro_gets_suggestions(self, mock_suggest, client, signed_in):
        signed_in(UserTier.PRO)
        mock_suggest.return_value = ["ada", "ada.codes"]

        response = client.post(
            "/api/v1/suggestions/usernames",
            json={"full_name": "Ada", "platform": "github"},
        )

        assert response.json() == {"suggestions": ["ada", "ada.codes"]}


class TestAssetRoutes:
    """Test image uploads."""

    def test_upload(self, client, signed_in, services):
        signed_in(UserTier.FREE)
        services["storage"].upload_image.return_value = "https://cdn.test/x.png"

        response = client.post(
            "/api/v1/assets",
            files={"file": ("photo.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 201
        assert response.json()["url"] == "https://cdn.test/x.png"
        services["storage"].upload_image.assert_called_once_with(USER_ID, b"\x89PNG", "image/png")


# =============================================================================
# Public Tests
# =============================================================================

class TestPublicRoutes:
    """Test unauthenticated card endpoints."""

    @patch("app.routers.public.CardService")
    def test_public_card_hides_disabled_fields(self, mock_cards, client, card):
        mock_cards.get_card.return_value = card

        response = client.get(f"/api/v1/public/cards/{CARD_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Ada Lovelace"
        assert [a["type"] for a in data["contact_actions"]] == ["phone", "email", "website"]
        assert [a["type"] for a in data["social_actions"]] == ["github", "blog"]

    @patch("app.routers.public.CardService")
    def test_public_card_hidden_address(self, mock_cards, client, card):
        enabled = card.enabled_fields.model_copy(update={"address": False, "gallery": False})
        mock_cards.get_card.return_value = card.model_copy(update={"enabled_fields": enabled})

        data = client.get(f"/api/v1/public/cards/{CARD_ID}").json()

        assert data["address"] is None
        assert data["gallery"] == []

    @patch("app.routers.public.CardService")
    def test_missing_card_is_404(self, mock_cards, client):
        mock_cards.get_card.return_value = None

        response = client.get("/api/v1/public/cards/not-a-uuid")

        assert response.status_code == 404
        assert response.json()["code"] == "CARD_NOT_FOUND"

    @patch("core.services.card_service.SupabaseClient")
    def test_malformed_card_row_is_404(self, mock_client, client, card_row):
        mock_client.fetch_card.return_value = {**card_row, "full_name": ""}

        response = client.get(f"/api/v1/public/cards/{CARD_ID}")

        assert response.status_code == 404

    @patch("app.routers.public.ClickService")
    @patch("app.routers.public.CardService")
    def test_vcard_download(self, mock_cards, mock_clicks, client, card):
        mock_cards.get_card.return_value = card

        response = client.get(f"/api/v1/public/cards/{CARD_ID}/vcard")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/vcard")
        assert 'filename="Ada_Lovelace.vcf"' in response.headers["content-disposition"]
        assert response.text.startswith("BEGIN:VCARD\r\n")
        mock_clicks.record_click.assert_called_once_with(CARD_ID, "save_contact", "Ada_Lovelace.vcf")

    @patch("app.routers.public.ClickService")
    @patch("app.routers.public.CardService")
    def test_vcard_of_missing_card_records_nothing(self, mock_cards, mock_clicks, client):
        mock_cards.get_card.return_value = None

        response = client.get(f"/api/v1/public/cards/{CARD_ID}/vcard")

        assert response.status_code == 404
        mock_clicks.record_click.assert_not_called()

    @patch("app.routers.public.ClickService")
    def test_record_click_is_accepted(self, mock_clicks, client):
        response = client.post(
            f"/api/v1/public/cards/{CARD_ID}/clicks",
            json={"type": "phone", "target_url": "tel:+441234567"},
        )

        assert response.status_code == 202
        mock_clicks.record_click.assert_called_once_with(CARD_ID, "phone", "tel:+441234567")

    def test_record_click_requires_type(self, client):
        response = client.post(f"/api/v1/public/cards/{CARD_ID}/clicks", json={})

        assert response.status_code == 422
