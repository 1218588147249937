# =============================================================================
# core/policy.py - Tier-Gated Feature Policy
# =============================================================================
# Pure functions from an account tier to what that tier may do.
# Every surface that gates a feature asks resolve_capabilities() instead of
# comparing tiers itself.
#
# Usage:
#   from core.policy import resolve_capabilities
#   caps = resolve_capabilities(user.tier, card_count=len(cards))
#   if not caps.can_create_card: ...
# =============================================================================

from dataclasses import dataclass

from core.models.user import UserTier

# Card limits per tier; tiers not listed get DEFAULT_CARD_LIMIT
CARD_LIMITS: dict[UserTier, int] = {
    UserTier.FREE: 2,
}
DEFAULT_CARD_LIMIT = 5

AI_UPSELL_HINT = "Upgrade to Pro to generate AI-powered insights and username suggestions."
ANALYTICS_UPSELL_HINT = "Upgrade to Pro to see detailed charts of how visitors use your card."


def max_cards(tier: UserTier) -> int:
    """Free accounts may own 2 cards; every other tier 5."""
    return CARD_LIMITS.get(tier, DEFAULT_CARD_LIMIT)


def can_create_card(tier: UserTier, current_count: int) -> bool:
    """True while the owner is below the tier's card limit."""
    return current_count < max_cards(tier)


def can_use_ai_features(tier: UserTier) -> bool:
    """AI insights and username suggestions are Pro only."""
    return tier == UserTier.PRO


def can_view_advanced_analytics(tier: UserTier) -> bool:
    """Per-type and per-day click charts are Pro only."""
    return tier == UserTier.PRO


def can_use_gallery(tier: UserTier) -> bool:
    """Any paid tier may show a photo gallery."""
    return tier != UserTier.FREE


@dataclass(frozen=True)
class TierCapabilities:
    """Everything a tier unlocks, resolved in one place."""

    tier: UserTier
    max_cards: int
    card_count: int
    can_create_card: bool
    can_use_ai_features: bool
    can_view_advanced_analytics: bool
    can_use_gallery: bool
    upsell_hint: str | None = None

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "max_cards": self.max_cards,
            "card_count": self.card_count,
            "can_create_card": self.can_create_card,
            "can_use_ai_features": self.can_use_ai_features,
            "can_view_advanced_analytics": self.can_view_advanced_analytics,
            "can_use_gallery": self.can_use_gallery,
            "upsell_hint": self.upsell_hint,
        }


def resolve_capabilities(tier: UserTier, card_count: int = 0) -> TierCapabilities:
    """
    Resolve the full capability set for a tier.

    Args:
        tier: The account tier
        card_count: How many cards the account currently owns

    Returns:
        TierCapabilities; `upsell_hint` is set when AI features are locked
    """
    ai = can_use_ai_features(tier)
    return TierCapabilities(
        tier=tier,
        max_cards=max_cards(tier),
        card_count=card_count,
        can_create_card=can_create_card(tier, card_count),
        can_use_ai_features=ai,
        can_view_advanced_analytics=can_view_advanced_analytics(tier),
        can_use_gallery=can_use_gallery(tier),
        upsell_hint=None if ai else AI_UPSELL_HINT,
    )
