import json
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from app.domains.access.roles import RoleLevel


class Visibility(str, Enum):
    """Режимы видимости документа"""
    PUBLIC = "public"
    PRIVATE = "private"
    ROLE = "role"


class ContentType(str, Enum):
    """Формат содержимого: сериализованная дельта редактора или простой текст"""
    QUILL = "quill"
    PLAIN = "plain"


def is_serialized_delta(content: str) -> bool:
    """Является ли строка JSON дельтой редактора; пустая строка - пустой документ"""
    if not content:
        return True
    try:
        data = json.loads(content)
    except ValueError:
        return False
    ops = data.get("ops") if isinstance(data, dict) else data
    return isinstance(ops, list) and all(isinstance(op, dict) for op in ops)


class OwnerSummary:
    """Минимальная проекция владельца для списков"""

    def __init__(self, id: uuid.UUID, name: str, role_level: int):
        self.id = id
        self.name = name
        self.role_level = role_level

    def __repr__(self) -> str:
        return f"OwnerSummary(id={self.id}, name={self.name})"


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        id: uuid.UUID,
        title: str,
        owner_id: uuid.UUID,
        content: Optional[str] = None,
        type: ContentType = ContentType.QUILL,
        visibility: Visibility = Visibility.PRIVATE,
        threshold: int = RoleLevel.REGULAR,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        owner: Optional[OwnerSummary] = None
    ):
        self.id = id
        self.title = title
        self.owner_id = owner_id
        # None, если документ загружен для списка без тела
        self.content = content
        self.type = ContentType(type)
        self.visibility = Visibility(visibility)
        self.threshold = threshold
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
        self.owner = owner

    @classmethod
    def create_document(
        cls,
        title: str,
        owner_id: uuid.UUID,
        content: str = "",
        type: ContentType = ContentType.QUILL,
        visibility: Visibility = Visibility.PRIVATE,
        threshold: int = RoleLevel.REGULAR
    ) -> "Document":
        """Создание нового документа"""
        return cls(
            id=uuid.uuid4(),
            title=title,
            owner_id=owner_id,
            content=content,
            type=type,
            visibility=visibility,
            threshold=threshold
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title}, visibility={self.visibility.value})"
