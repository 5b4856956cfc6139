from app.api.http.auth import router as auth_router
from app.api.http.users import router as users_router
from app.api.http.documents import router as documents_router

__all__ = [
    "auth_router",
    "users_router",
    "documents_router"
]
