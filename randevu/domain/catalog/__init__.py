"""Catalog domain - services, staff and staff leave"""

from .router import router

__all__ = ["router"]
