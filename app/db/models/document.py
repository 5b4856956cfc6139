from sqlalchemy import Column, String, Text, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship, validates

from app.core.errors import ValidationError
from app.db.base import BaseModel
from app.domains.access.roles import RoleLevel
from app.domains.documents.entities import ContentType, Visibility, is_serialized_delta


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    type = Column(String(16), nullable=False, default=ContentType.QUILL.value)
    visibility = Column(String(16), nullable=False, default=Visibility.PRIVATE.value, index=True)
    # Используется только при visibility == "role"
    threshold = Column(Integer, nullable=False, default=RoleLevel.REGULAR)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_documents")

    @validates("title")
    def validate_title(self, key, value):
        if value is None or not value.strip():
            raise ValidationError.for_field(key, "Title cannot be empty")
        return value.strip()

    @validates("content")
    def validate_content(self, key, value):
        if value is None:
            raise ValidationError.for_field(key, "Content cannot be null")
        return value

    @validates("type")
    def validate_type(self, key, value):
        try:
            return ContentType(value).value
        except ValueError:
            raise ValidationError.for_field(key, f"Unsupported content type: {value}")

    @validates("visibility")
    def validate_visibility(self, key, value):
        try:
            return Visibility(value).value
        except ValueError:
            raise ValidationError.for_field(key, f"Unsupported visibility: {value}")

    @validates("threshold")
    def validate_threshold(self, key, value):
        if value not in {role.value for role in RoleLevel}:
            raise ValidationError.for_field(key, "Unknown role level")
        return int(value)

    def check_body(self):
        """Содержимое quill документа должно быть сериализованной дельтой"""
        kind = self.type or ContentType.QUILL.value
        if kind == ContentType.QUILL.value and not is_serialized_delta(self.content or ""):
            raise ValidationError.for_field("content", "Quill content must be a serialized delta")
