# =============================================================================
# core/state.py - Session State and Events
# =============================================================================
# The in-memory mirror of "who is signed in and what cards they own".
#
# State is immutable. Every change is an event applied by reduce(), which
# always replaces whole slices (the user, the card tuple) rather than
# editing them in place.
#
# Usage:
#   state = reduce(state, CardAdded(card))
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, replace

from core.models.card import CardData
from core.models.user import User


@dataclass(frozen=True)
class AppState:
    """
    Snapshot of the session.

    `loading` starts True and stays True until the first sign-in or
    sign-out has been resolved.
    `cards_loaded` is False while the card list failed to load, so
    `cards` cannot be trusted for the card limit.
    """
    user: User | None = None
    cards: tuple[CardData, ...] = ()
    loading: bool = True
    cards_loaded: bool = False

    @property
    def is_signed_in(self) -> bool:
        return self.user is not None

    def find_card(self, card_id: str) -> CardData | None:
        return next((c for c in self.cards if c.id == card_id), None)


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class LoadingChanged:
    loading: bool


@dataclass(frozen=True)
class SessionStarted:
    """A profile was found for the session; cards are newest first."""
    user: User
    cards: tuple[CardData, ...] = ()
    cards_loaded: bool = True


@dataclass(frozen=True)
class SessionEnded:
    """Signed out, or the session had no profile."""


@dataclass(frozen=True)
class UserChanged:
    user: User


@dataclass(frozen=True)
class CardsLoaded:
    cards: tuple[CardData, ...]


@dataclass(frozen=True)
class CardAdded:
    card: CardData


@dataclass(frozen=True)
class CardReplaced:
    card: CardData


@dataclass(frozen=True)
class CardRemoved:
    card_id: str


StateEvent = (
    LoadingChanged | SessionStarted | SessionEnded | UserChanged
    | CardsLoaded | CardAdded | CardReplaced | CardRemoved
)


def reduce(state: AppState, event: StateEvent) -> AppState:
    """
    Apply one event and return the new state.

    Raises:
        TypeError: For an unknown event type
    """
    if isinstance(event, LoadingChanged):
        return replace(state, loading=event.loading)

    if isinstance(event, SessionStarted):
        return AppState(
            user=event.user,
            cards=tuple(event.cards),
            loading=False,
            cards_loaded=event.cards_loaded,
        )

    if isinstance(event, SessionEnded):
        return AppState(user=None, cards=(), loading=False)

    if isinstance(event, UserChanged):
        return replace(state, user=event.user)

    if isinstance(event, CardsLoaded):
        return replace(state, cards=tuple(event.cards), cards_loaded=True)

    if isinstance(event, CardAdded):
        # Newest first, matching the order cards are fetched in
        return replace(state, cards=(event.card, *state.cards))

    if isinstance(event, CardReplaced):
        return replace(
            state,
            cards=tuple(event.card if c.id == event.card.id else c for c in state.cards),
        )

    if isinstance(event, CardRemoved):
        return replace(state, cards=tuple(c for c in state.cards if c.id != event.card_id))

    raise TypeError(f"Unknown state event: {type(event).__name__}")
