# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .card_service import CardService
from .click_service import ClickService
from .profile_service import ProfileService
from .storage_service import StorageService

__all__ = [
    "AuthService",
    "CardService",
    "ClickService",
    "ProfileService",
    "StorageService",
]
