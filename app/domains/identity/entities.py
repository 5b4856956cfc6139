import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from passlib.context import CryptContext

from app.domains.access.roles import RoleLevel, RequesterContext, is_super_admin

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserLifecycle(Enum):
    """Состояние учетной записи"""
    ACTIVE = "active"
    DELETED = "deleted"


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        name: str,
        email: str,
        password_hash: str,
        role_level: int = RoleLevel.REGULAR,
        is_private: bool = True,
        deleted_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.role_level = role_level
        self.is_private = is_private
        self.deleted_at = deleted_at
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    @property
    def lifecycle(self) -> UserLifecycle:
        return UserLifecycle.DELETED if self.deleted_at is not None else UserLifecycle.ACTIVE

    def is_visible_to(self, requester: RequesterContext) -> bool:
        """Удаленный пользователь виден только супер-администратору"""
        return self.lifecycle is UserLifecycle.ACTIVE or is_super_admin(requester)

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return pwd_context.verify(password[:72], self.password_hash)

    def soft_delete(self) -> None:
        """Пометка пользователя удаленным; запись остается в базе"""
        self.deleted_at = datetime.utcnow()
        self.updated_at = self.deleted_at

    def to_requester(self) -> RequesterContext:
        return RequesterContext(id=self.id, role_level=self.role_level)

    @classmethod
    def create_user(
        cls,
        name: str,
        email: str,
        password: str,
        role_level: int = RoleLevel.REGULAR
    ) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        # bcrypt имеет ограничение 72 байта, обрезаем пароль если нужно
        password_hash = pwd_context.hash(password[:72])

        return cls(
            id=uuid.uuid4(),
            name=name,
            email=email,
            password_hash=password_hash,
            role_level=role_level
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role_level={self.role_level})"
