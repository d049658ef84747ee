"""Appointments domain - booking, availability and owner management"""

from .router import router

__all__ = ["router"]
