import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, PermissionDenied, translate_store_errors
from app.core.security import create_access_token
from app.db.repositories.user_repository import UserRepository
from app.domains.access.roles import RequesterContext, is_admin_or_higher, is_self
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с пользователями и аутентификацией"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""
        user = User.create_user(
            name=user_data.name,
            email=user_data.email,
            password=user_data.password
        )

        async with translate_store_errors("register user"):
            created = await self.user_repository.create(user)

        logger.info(f"User {created.id} signed up")
        return created

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация пользователя; удаленные войти не могут"""
        async with translate_store_errors("authenticate user"):
            user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.authenticate(login_data.password):
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Optional[str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)

        if not user:
            return None

        token_data = {
            "sub": str(user.id),
            "role": int(user.role_level)
        }

        return create_access_token(data=token_data)

    async def delete_user(self, requester: RequesterContext, user_id: uuid.UUID) -> None:
        """Мягкое удаление пользователя: сам пользователь или администратор"""
        if not (is_self(requester, user_id) or is_admin_or_higher(requester)):
            raise PermissionDenied("You can only delete your own account")

        async with translate_store_errors("delete user"):
            user = await self.user_repository.get_by_id(user_id)
            if user is None:
                raise NotFound("User not found")
            await self.user_repository.soft_delete(user)

        logger.info(f"User {user_id} soft-deleted by {requester.id}")
