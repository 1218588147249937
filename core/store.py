# =============================================================================
# core/store.py - Session/Card State Store
# =============================================================================
# SessionStore is the single owner of the signed-in user and their cards.
# It mediates every read and write to Supabase and only applies a change to
# its state after Supabase has confirmed it, so a failed write leaves the
# previous state untouched.
#
# Lifecycle:
#   store = SessionStore()            # loading, nobody signed in
#   store.initialize(session)         # sign-in: profile, then cards
#   store.add_card({...})             # confirmed writes update state
#   store.reset()                     # sign-out: clears memory only
#
# Collaborators are injected (defaults are the Supabase-backed services) so
# tests and other front ends can supply their own.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable

from core.models.card import CardCreate, CardData, CardFields, CardLinkState
from core.models.user import AuthSession, User, UserTier
from core.policy import TierCapabilities, resolve_capabilities
from core.services.auth_service import AuthService, to_auth_session
from core.services.card_service import CardService
from core.services.profile_service import ProfileService
from core.services.storage_service import StorageService
from core.state import (
    AppState,
    CardAdded,
    CardRemoved,
    CardReplaced,
    CardsLoaded,
    LoadingChanged,
    SessionEnded,
    SessionStarted,
    StateEvent,
    UserChanged,
    reduce,
)
from app.exceptions import AuthenticationError, CardLimitReachedError, CardNotFoundError

logger = logging.getLogger(__name__)

Listener = Callable[[AppState, StateEvent], None]


class SessionStore:
    """
    Owned, injectable session state with an event-based update API.

    Every state change goes through dispatch(); listeners registered with
    subscribe() see each event and the state it produced.
    """

    def __init__(
        self,
        cards: Any = CardService,
        profiles: Any = ProfileService,
        auth: Any = AuthService,
        storage: Any = StorageService,
    ):
        self._cards = cards
        self._profiles = profiles
        self._auth = auth
        self._storage = storage

        self._state = AppState()
        self._listeners: list[Listener] = []
        # Bumped on every sign-in/sign-out; a fetch that finishes after a
        # newer auth event must not apply its result
        self._generation = 0
        self._subscription = None

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def cards(self) -> list[CardData]:
        return list(self._state.cards)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def capabilities(self) -> TierCapabilities | None:
        """Capabilities of the signed-in user, or None when signed out."""
        if self.user is None:
            return None
        return resolve_capabilities(self.user.tier, card_count=len(self._state.cards))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: StateEvent) -> AppState:
        """Apply an event and notify listeners."""
        self._state = reduce(self._state, event)
        for listener in list(self._listeners):
            try:
                listener(self._state, event)
            except Exception:
                logger.exception(f"State listener failed on {type(event).__name__}")
        return self._state

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, session: AuthSession) -> User | None:
        """
        Load the signed-in user and their cards.

        A missing profile signs the session out instead of exposing a
        half-initialized user. A failed card fetch still signs in, with
        no cards and `cards_loaded` unset until a later fetch succeeds.

        Returns:
            The signed-in User, or None if the session has no profile or a
            newer auth event superseded this load
        """
        self._generation += 1
        generation = self._generation
        self.dispatch(LoadingChanged(True))

        try:
            profile = self._profiles.get_profile(session.user_id)
        except Exception as e:
            logger.error(f"Error fetching profile for {session.user_id}: {e}")
            profile = None

        if generation != self._generation:
            logger.debug(f"Discarding stale profile load for {session.user_id}")
            return None

        if profile is None:
            logger.warning(f"No profile for {session.user_id}; treating session as signed out")
            self.dispatch(SessionEnded())
            return None

        cards_loaded = True
        try:
            cards = self._cards.list_cards(profile.id)
        except Exception as e:
            logger.error(f"Error fetching cards for {profile.id}: {e}")
            cards = []
            cards_loaded = False

        if generation != self._generation:
            logger.debug(f"Discarding stale card load for {session.user_id}")
            return None

        user = User.from_profile(profile, session)
        self.dispatch(SessionStarted(user=user, cards=tuple(cards), cards_loaded=cards_loaded))
        return user

    def reset(self) -> None:
        """Forget the user and cards. Supabase is not contacted."""
        self._generation += 1
        self.dispatch(SessionEnded())

    def handle_auth_event(self, event: Any, session: Any) -> None:
        """
        React to an auth state change: initialize on a session, reset on none.

        Accepts either an AuthSession or a Supabase session object.
        """
        logger.debug(f"Auth event: {event}")
        if session is None:
            self.reset()
            return
        if not isinstance(session, AuthSession):
            session = to_auth_session(session)
        self.initialize(session)

    def bind_auth_events(self) -> None:
        """Follow the auth client's state-change stream until close()."""
        if self._subscription is None:
            self._subscription = self._auth.on_auth_state_change(self.handle_auth_event)

    def close(self) -> None:
        """Stop following auth events."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    # -------------------------------------------------------------------------
    # Account
    # -------------------------------------------------------------------------

    def sign_up(self, email: str, password: str, tier: UserTier) -> AuthSession:
        """Create an account; signs in right away when a session is issued."""
        session = self._auth.sign_up(email, password, tier)
        if session.access_token:
            self.initialize(session)
        return session

    def sign_in(self, email: str, password: str) -> User | None:
        session = self._auth.sign_in(email, password)
        return self.initialize(session)

    def sign_out(self) -> None:
        """
        Revoke the session, then clear local state.

        Local state is cleared even when the revoke fails; the error is
        still raised.
        """
        try:
            if self.user is not None:
                self._auth.sign_out(self.user.session)
        finally:
            self.reset()

    def change_tier(self, tier: UserTier) -> User:
        """Move the signed-in user to another plan."""
        user = self._require_user()
        profile = self._profiles.update_tier(user.id, tier)
        updated = User.from_profile(profile, user.session)
        self.dispatch(UserChanged(updated))
        return updated

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    def add_card(self, data: CardCreate | dict[str, Any]) -> CardData:
        """
        Create a card for the signed-in user.

        Input is validated (full_name required) and the tier limit checked
        before any write. If the card list never loaded it is fetched
        first, so the limit is never checked against a partial list.

        Raises:
            pydantic.ValidationError: If the card data is invalid
            CardLimitReachedError: If the user already has max_cards cards
            SupabaseClientError: If the card list can't be loaded or either
                create phase fails
        """
        user = self._require_user()
        card = data if isinstance(data, CardCreate) else CardCreate.model_validate(data)

        if not self._state.cards_loaded:
            self.refresh_cards()

        caps = resolve_capabilities(user.tier, card_count=len(self._state.cards))
        if not caps.can_create_card:
            raise CardLimitReachedError(user.tier.value, caps.max_cards)

        card = self._apply_tier_rules(card, caps)
        created = self._cards.create_card(user.id, card)
        self.dispatch(CardAdded(created))
        return created

    def update_card(self, card: CardData) -> CardData:
        """
        Save an edited card.

        Raises:
            CardNotFoundError: If the card isn't one of the user's cards
            SupabaseClientError: If the update fails
        """
        user = self._require_user()
        self._require_card(card.id)

        card = self._apply_tier_rules(card, resolve_capabilities(user.tier, len(self._state.cards)))
        saved = self._cards.update_card(card)
        self.dispatch(CardReplaced(saved))
        return saved

    def edit_card(self, card_id: str, fields: CardFields) -> CardData:
        """Replace the editable fields of one of the user's cards."""
        current = self._require_card(card_id)
        edited = CardData.model_validate({**current.model_dump(), **fields.model_dump()})
        return self.update_card(edited)

    def delete_card(self, card_id: str) -> None:
        """
        Delete one of the user's cards.

        Raises:
            CardNotFoundError: If the card isn't one of the user's cards
            SupabaseClientError: If the delete fails
        """
        self._require_user()
        self._require_card(card_id)
        self._cards.delete_card(card_id)
        self.dispatch(CardRemoved(card_id))

    def get_card_by_id(self, card_id: str) -> CardData | None:
        """Any card by id, for display; None when missing or on error."""
        return self._cards.get_card(card_id)

    def get_owned_card(self, card_id: str) -> CardData:
        """
        One of the signed-in user's cards.

        Raises:
            CardNotFoundError: If the user owns no such card
        """
        self._require_user()
        return self._require_card(card_id)

    def refresh_cards(self) -> list[CardData]:
        """Reload the card list from Supabase."""
        user = self._require_user()
        cards = self._cards.list_cards(user.id)
        self.dispatch(CardsLoaded(tuple(cards)))
        return cards

    def find_unlinked_cards(self) -> list[CardData]:
        """Cards whose QR link was never written."""
        return self._cards.find_unlinked_cards(self.cards)

    def repair_qr_link(self, card_id: str) -> CardData:
        """
        Finish the second create phase for a card stuck in `created`.

        Already-linked cards are returned unchanged.
        """
        self._require_user()
        card = self._require_card(card_id)
        if card.link_state == CardLinkState.QR_LINKED:
            return card

        linked = self._cards.link_qr_code(card)
        self.dispatch(CardReplaced(linked))
        return linked

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def upload_asset(self, source: str | bytes, content_type: str | None = None) -> str | None:
        """
        Upload an image for the signed-in user and return its public URL.

        `source` is either a base64 data URL or raw bytes with their
        content type. Returns None when nobody is signed in.
        """
        if self.user is None:
            return None
        if isinstance(source, str):
            return self._storage.upload_data_url(self.user.id, source)
        return self._storage.upload_image(self.user.id, source, content_type or "")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_user(self) -> User:
        if self.user is None:
            raise AuthenticationError("not signed in")
        return self.user

    def _require_card(self, card_id: str) -> CardData:
        card = self._state.find_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    @staticmethod
    def _apply_tier_rules(card, caps: TierCapabilities):
        """Tiers without gallery access never publish a gallery."""
        if caps.can_use_gallery or not card.enabled_fields.gallery:
            return card
        enabled = card.enabled_fields.model_copy(update={"gallery": False})
        return card.model_copy(update={"enabled_fields": enabled})
