"""Users Domain - login against the legacy user store and user management"""

from .router import auth_router, router

__all__ = ["auth_router", "router"]
