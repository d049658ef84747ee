"""Raffle domain - monthly customer raffle earned through completed appointments"""

from .router import router

__all__ = ["router"]
