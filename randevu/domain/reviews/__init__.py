"""Reviews domain - customer reviews of completed appointments"""

from .router import router

__all__ = ["router"]
