import uuid
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class RoleLevel(IntEnum):
    """Уровни ролей: чем выше значение, тем больше прав"""
    REGULAR = 1
    ADMIN = 2
    SUPER_ADMIN = 3


# Отсутствующая роль ниже любой существующей
NO_ROLE = 0


@dataclass(frozen=True)
class RequesterContext:
    """Идентичность автора запроса, полученная из токена"""
    id: uuid.UUID
    role_level: Optional[int] = None

    @property
    def effective_role(self) -> int:
        return self.role_level if self.role_level is not None else NO_ROLE


def is_admin_or_higher(requester: RequesterContext) -> bool:
    return requester.effective_role >= RoleLevel.ADMIN


def is_super_admin(requester: RequesterContext) -> bool:
    return requester.effective_role >= RoleLevel.SUPER_ADMIN


def is_owner(requester: RequesterContext, record: Any) -> bool:
    """Является ли автор запроса владельцем записи (по owner_id)"""
    return getattr(record, "owner_id", None) == requester.id


def is_self(requester: RequesterContext, user_id: uuid.UUID) -> bool:
    return requester.id == user_id
