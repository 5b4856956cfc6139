from app.domains.identity.entities import User, UserLifecycle
from app.domains.identity.schemas import (
    UserBase, UserCreate, UserLogin, UserResponse, Token, TokenData
)

__all__ = [
    "User", "UserLifecycle",
    "UserBase", "UserCreate", "UserLogin", "UserResponse", "Token", "TokenData"
]
