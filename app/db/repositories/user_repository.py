from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.errors import ValidationError
from app.db.models.user import User as UserModel
from app.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role_level=user.role_level,
            is_private=user.is_private
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValidationError.for_field("email", "Someone has already signed up with that email")
        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_id(self, user_id: uuid.UUID, include_deleted: bool = False) -> Optional[User]:
        """Получение пользователя по id; удаленные - только по запросу"""
        query = select(UserModel).where(UserModel.id == user_id)
        if not include_deleted:
            query = query.where(UserModel.deleted_at.is_(None))
        result = await self.session.execute(query)
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение активного пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(
                UserModel.email == email.strip().lower(),
                UserModel.deleted_at.is_(None)
            )
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def soft_delete(self, user: User) -> bool:
        """Мягкое удаление: выставляется deleted_at"""
        db_user = await self.session.get(UserModel, user.id)
        if db_user is None or db_user.deleted_at is not None:
            return False

        user.soft_delete()
        db_user.deleted_at = user.deleted_at
        db_user.updated_at = user.updated_at
        await self.session.commit()
        return True

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            name=db_user.name,
            email=db_user.email,
            password_hash=db_user.password_hash,
            role_level=db_user.role_level,
            is_private=db_user.is_private,
            deleted_at=db_user.deleted_at,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
