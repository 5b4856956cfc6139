"""
Слой авторизации запросов.

Достает автора запроса из bearer токена и заранее находит документ,
к которому обращаются retrieve/update/destroy, проверяя доступ к нему.
"""
import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import (
    AuthenticationError, MalformedIdentifier, NotFound, PermissionDenied, translate_store_errors
)
from app.core.security import verify_token
from app.db.repositories.document_repository import DocumentRepository
from app.domains.access.predicates import visible_documents
from app.domains.access.roles import RequesterContext, is_admin_or_higher, is_owner
from app.domains.documents.entities import Document
from app.domains.identity.schemas import TokenData

security = HTTPBearer(auto_error=False)


def parse_identifier(raw: str) -> uuid.UUID:
    """Разбор id из пути; кривой id - ошибка 400, а не 404"""
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise MalformedIdentifier("Invalid ID")


async def get_requester(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> RequesterContext:
    """Зависимость для получения автора запроса"""
    if credentials is None:
        raise AuthenticationError("Authentication token required")

    payload = verify_token(credentials.credentials)
    if not payload:
        raise AuthenticationError()

    try:
        token_data = TokenData.model_validate(payload)
    except PydanticValidationError:
        raise AuthenticationError()

    return RequesterContext(id=token_data.sub, role_level=token_data.role)


async def _load_document(document_id: str, db: AsyncSession) -> Document:
    document_uuid = parse_identifier(document_id)
    async with translate_store_errors("load document"):
        document = await DocumentRepository(db).get_by_id(document_uuid)
    if document is None:
        raise NotFound("Document not found")
    return document


async def get_readable_document(
    document_id: str,
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
) -> Document:
    """Документ, который автор запроса может просматривать"""
    document = await _load_document(document_id, db)
    if not visible_documents(requester).matches(document):
        raise PermissionDenied("You don't have access to this document")
    return document


async def get_writable_document(
    document_id: str,
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
) -> Document:
    """Документ, который автор запроса может менять или удалять"""
    document = await _load_document(document_id, db)
    if not (is_owner(requester, document) or is_admin_or_higher(requester)):
        raise PermissionDenied("Only the owner can modify this document")
    return document
