"""Inquiries domain - consultation and project requests sent to a single business"""

from .router import router

__all__ = ["router"]
