"""Service requests domain - quote requests, offers and business matching"""

from .router import router

__all__ = ["router"]
