from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime

from app.core.pagination import PageMetadata
from app.domains.access.roles import RoleLevel
from app.domains.documents.entities import ContentType, Visibility


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(..., max_length=255)
    content: str = Field(default="", max_length=1000000)  # 1MB max content
    type: ContentType = ContentType.QUILL
    visibility: Visibility = Visibility.PRIVATE
    threshold: int = RoleLevel.REGULAR


class DocumentUpdate(BaseModel):
    """
    Схема для частичного обновления документа.

    Применяются только явно переданные поля (model_dump(exclude_unset=True)),
    поэтому отсутствующее поле и поле со значением по умолчанию различаются.
    """
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)
    type: Optional[ContentType] = None
    visibility: Optional[Visibility] = None
    threshold: Optional[int] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class OwnerResponse(BaseModel):
    """Минимальная проекция владельца"""
    id: uuid.UUID
    name: str
    role_level: int

    model_config = ConfigDict(from_attributes=True)


class DocumentListItem(BaseModel):
    """Документ в списке: без тела"""
    id: uuid.UUID
    title: str
    type: ContentType
    visibility: Visibility
    threshold: int
    owner_id: uuid.UUID
    owner: Optional[OwnerResponse] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(DocumentListItem):
    """Схема для ответа с данными документа, включая содержимое"""
    content: str


class DocumentListResponse(BaseModel):
    """Страница документов с метаданными"""
    items: List[DocumentListItem] = Field(..., alias="list")
    metadata: PageMetadata

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
