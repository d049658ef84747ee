"""Dashboard domain - owner statistics and trends"""

from .router import router

__all__ = ["router"]
