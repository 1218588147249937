# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Profiles (id, email, tier)
# - Cards (full card rows, newest first)
# - Clicks (append-only visitor events)
# - Storage (image upload and public URLs)
#
# Two clients are kept: the service client for data access and an anon
# client for password auth, so auth sessions never replace the service role.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   card = SupabaseClient.fetch_card(card_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows returned" on .single()
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and an actionable suggestion alongside the message.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        profile = SupabaseClient.fetch_profile(user_id)
        cards = SupabaseClient.fetch_cards_for_user(user_id)
    """

    _instance: Client | None = None
    _auth_instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_auth_client(cls) -> Client:
        """
        Get or create the anon-key client used for sign-up/sign-in/sign-out.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._auth_instance is None:
            try:
                cls._auth_instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_ANON_KEY
                )
                logger.info("Supabase auth client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase auth client: {e}",
                    code="AUTH_CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return cls._auth_instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a profile row (id, email, tier).

        Returns:
            Profile dict, or None if the user has no profile

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def insert_profile(cls, user_id: str | UUID, email: str, tier: str) -> dict[str, Any]:
        """
        Insert the profile row for a newly signed-up user.

        Auth does not create profiles on its own, so sign-up writes one.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()
        data = {"id": cls._normalize_uuid(user_id), "email": email, "tier": tier}

        try:
            response = client.table("profiles").insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert profile: {e}",
                code="INSERT_PROFILE_FAILED",
                details={"user_id": data["id"]}
            )

    @classmethod
    def update_profile(cls, user_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Update a profile row and return it.

        Raises:
            SupabaseClientError: If the update fails or matches no row
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .update(changes)
                .eq("id", user_id_str)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message=f"No profile to update for user {user_id_str}",
                code="UPDATE_NO_DATA",
                details={"user_id": user_id_str}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_card(cls, card_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single card by ID.

        Returns:
            Card dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        card_id_str = cls._normalize_uuid(card_id)

        try:
            response = (
                client.table("cards")
                .select("*")
                .eq("id", card_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch card: {e}",
                code="FETCH_CARD_FAILED",
                suggestion="Check that the card_id is a valid UUID",
                details={"card_id": card_id_str}
            )

    @classmethod
    def fetch_cards_for_user(cls, user_id: str | UUID) -> list[dict[str, Any]]:
        """
        Fetch all cards owned by a user, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("cards")
                .select("*")
                .eq("user_id", user_id_str)
                .order("created_at", desc=True)
                .execute()
            )
            cards = response.data or []
            logger.debug(f"Fetched {len(cards)} cards for user {user_id_str}")
            return cards

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch cards: {e}",
                code="FETCH_CARDS_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def insert_card(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a card row and return it with its assigned id.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("cards").insert(data).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Failed to create card: insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert card: {e}",
                code="INSERT_CARD_FAILED",
                details={"user_id": data.get("user_id")}
            )

    @classmethod
    def update_card(cls, card_id: str | UUID, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Update a card row and return the stored version.

        Raises:
            SupabaseClientError: If the update fails or matches no row
        """
        client = cls.get_client()
        card_id_str = cls._normalize_uuid(card_id)

        try:
            response = (
                client.table("cards")
                .update(changes)
                .eq("id", card_id_str)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message=f"No card to update with id {card_id_str}",
                code="UPDATE_NO_DATA",
                details={"card_id": card_id_str}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update card: {e}",
                code="UPDATE_CARD_FAILED",
                details={"card_id": card_id_str}
            )

    @classmethod
    def delete_card(cls, card_id: str | UUID) -> None:
        """
        Delete a card row. Its clicks are removed by the table's cascade.

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        card_id_str = cls._normalize_uuid(card_id)

        try:
            client.table("cards").delete().eq("id", card_id_str).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete card: {e}",
                code="DELETE_CARD_FAILED",
                details={"card_id": card_id_str}
            )

    # -------------------------------------------------------------------------
    # Clicks
    # -------------------------------------------------------------------------

    @classmethod
    def insert_click(
        cls,
        card_id: str | UUID,
        click_type: str,
        target_url: str,
    ) -> dict[str, Any] | None:
        """
        Append a click event. The id and created_at are assigned server side.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()
        data = {
            "card_id": cls._normalize_uuid(card_id),
            "type": click_type,
            "target_url": target_url,
        }

        try:
            response = client.table("clicks").insert(data).execute()
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert click: {e}",
                code="INSERT_CLICK_FAILED",
                details={"card_id": data["card_id"], "type": click_type}
            )

    @classmethod
    def fetch_clicks(cls, card_id: str | UUID) -> list[dict[str, Any]]:
        """
        Fetch every click for a card, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        card_id_str = cls._normalize_uuid(card_id)

        try:
            response = (
                client.table("clicks")
                .select("*")
                .eq("card_id", card_id_str)
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch clicks: {e}",
                code="FETCH_CLICKS_FAILED",
                details={"card_id": card_id_str}
            )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    @classmethod
    def upload_object(cls, path: str, content: bytes, content_type: str) -> str:
        """
        Upload bytes to the asset bucket.

        Returns:
            The storage path

        Raises:
            SupabaseClientError: If upload fails
        """
        client = cls.get_client()

        try:
            client.storage.from_(settings.STORAGE_BUCKET).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type}
            )
            logger.info(f"Uploaded object to storage: {path}")
            return path

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upload object: {e}",
                code="UPLOAD_FAILED",
                details={"path": path}
            )

    @classmethod
    def get_public_url(cls, path: str) -> str:
        """Get the public URL for an object in the asset bucket."""
        client = cls.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET).get_public_url(path)
