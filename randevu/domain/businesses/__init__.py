"""Businesses domain - profiles, working hours and categories"""

from .router import router

__all__ = ["router"]
