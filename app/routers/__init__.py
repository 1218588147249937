# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - cards.py: Card CRUD, share link and QR repair
# - analytics.py: Click analytics and AI insights
# - suggestions.py: AI username suggestions
# - assets.py: Image uploads
# - public.py: Unauthenticated card view, vCard and click tracking
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import cards
from . import analytics
from . import suggestions
from . import assets
from . import public

__all__ = [
    "health",
    "cards",
    "analytics",
    "suggestions",
    "assets",
    "public",
]
