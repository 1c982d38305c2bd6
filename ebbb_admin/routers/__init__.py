from .admin_auth_router import router as admin_auth_router

__all__ = ["admin_auth_router"]
