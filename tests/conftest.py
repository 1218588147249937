# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides card, click and profile rows shaped like Supabase returns them
# =============================================================================

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("APP_ORIGIN", "https://loopcard.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.card import CardData
from core.models.click import Click
from core.models.user import AuthSession, Profile, User, UserTier
from core.store import SessionStore

USER_ID = "11111111-1111-1111-1111-111111111111"
CARD_ID = "22222222-2222-2222-2222-222222222222"
OTHER_CARD_ID = "33333333-3333-3333-3333-333333333333"

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

SESSION = AuthSession(user_id=USER_ID, email="ada@example.com", access_token="token")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def now():
    """Fixed reference time for window calculations."""
    return NOW


@pytest.fixture
def profile_row():
    """A profiles table row."""
    return {"id": USER_ID, "email": "ada@example.com", "tier": "Free"}


@pytest.fixture
def card_row():
    """A fully linked cards table row."""
    return {
        "id": CARD_ID,
        "user_id": USER_ID,
        "profile_photo": "https://cdn.test/ada.jpg",
        "banner_photo": "https://cdn.test/banner.jpg",
        "full_name": "Ada Lovelace",
        "business_name": "Analytical Engines",
        "role": "Engineer",
        "tagline": "Poetical science",
        "contact": {
            "phone": "+441234567",
            "whatsapp": "441234567",
            "email": "ada@example.com",
            "website": "https://ada.dev",
        },
        "socials": [
            {"id": "s1", "platform": "github", "username": "ada", "enabled": True},
            {"id": "s2", "platform": "linkedin", "username": "", "enabled": True},
            {"id": "s3", "platform": "Blog", "username": "ada.blog", "enabled": True},
            {"id": "s4", "platform": "twitter", "username": "ada", "enabled": False},
        ],
        "address": "12 St James's Square, London",
        "gallery": ["https://cdn.test/g1.jpg"],
        "enabled_fields": {
            "phone": True,
            "whatsapp": False,
            "email": True,
            "website": True,
            "address": True,
            "gallery": True,
        },
        "qr_code_url": "https://api.qrserver.com/v1/create-qr-code/?size=150x150&data=x",
        "created_at": "2024-06-01T10:00:00+00:00",
    }


@pytest.fixture
def card(card_row):
    """The card_row as a CardData."""
    return CardData.from_row(card_row)


@pytest.fixture
def unlinked_card(card_row):
    """A card whose QR link was never written."""
    return CardData.from_row({**card_row, "id": OTHER_CARD_ID, "qr_code_url": ""})


@pytest.fixture
def make_user():
    """Factory for signed-in users of any tier."""
    def _make(tier: UserTier = UserTier.FREE) -> User:
        return User(
            id=USER_ID,
            email="ada@example.com",
            tier=tier,
            session=AuthSession(user_id=USER_ID, email="ada@example.com", access_token="token"),
        )
    return _make


@pytest.fixture
def make_profile():
    """Factory for profiles of any tier."""
    def _make(tier: UserTier = UserTier.FREE) -> Profile:
        return Profile(id=USER_ID, email="ada@example.com", tier=tier)
    return _make


@pytest.fixture
def make_click():
    """Factory for clicks `days_ago` days before NOW."""
    def _make(click_type: str, days_ago: float = 0, **kwargs) -> Click:
        return Click(
            card_id=CARD_ID,
            type=click_type,
            created_at=NOW - timedelta(days=days_ago),
            **kwargs,
        )
    return _make


@pytest.fixture
def services():
    """Mocked collaborators for a SessionStore."""
    return {
        "cards": MagicMock(),
        "profiles": MagicMock(),
        "auth": MagicMock(),
        "storage": MagicMock(),
    }


@pytest.fixture
def make_store(services, make_profile):
    """Build a store signed in at the given tier with the given cards."""
    def _make(tier: UserTier = UserTier.FREE, cards=()) -> SessionStore:
        services["profiles"].get_profile.return_value = make_profile(tier)
        services["cards"].list_cards.return_value = list(cards)
        store = SessionStore(**services)
        store.initialize(SESSION)
        return store
    return _make
