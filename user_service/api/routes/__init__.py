"""API routers."""

from user_service.api.routes.users import router as users_router

__all__ = ["users_router"]
