from sqlalchemy import Column, String, Boolean, Integer, DateTime
from sqlalchemy.orm import relationship, validates

from app.core.errors import ValidationError
from app.db.base import BaseModel
from app.domains.access.roles import RoleLevel


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role_level = Column(Integer, nullable=False, default=RoleLevel.REGULAR)
    is_private = Column(Boolean, nullable=False, default=True)
    # NULL - активный пользователь
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    owned_documents = relationship("Document", back_populates="owner", cascade="all, delete-orphan")

    @validates("name")
    def validate_name(self, key, value):
        if not value or not value.strip():
            raise ValidationError.for_field(key, "Please provide a name")
        return value

    @validates("email")
    def validate_email(self, key, value):
        if not value or not value.strip():
            raise ValidationError.for_field(key, "Please provide an email")
        return value.strip().lower()

    @validates("role_level")
    def validate_role_level(self, key, value):
        if value not in {role.value for role in RoleLevel}:
            raise ValidationError.for_field(key, "Unknown role level")
        return int(value)
