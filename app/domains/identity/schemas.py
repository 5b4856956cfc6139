from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime
import re
import uuid

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z'-]*\s+[A-Za-z][A-Za-z'-]*$")


class UserBase(BaseModel):
    """Базовая схема пользователя"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not NAME_PATTERN.match(v.strip()):
            raise ValueError('Please provide a valid first and last name')
        return v.strip()


class UserCreate(UserBase):
    """Схема для создания пользователя"""
    password: str = Field(..., min_length=8, max_length=128)


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя (без пароля)"""
    id: uuid.UUID
    name: str
    email: str
    role_level: int
    is_private: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Схема для данных из JWT токена"""
    sub: uuid.UUID
    role: Optional[int] = None
