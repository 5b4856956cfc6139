from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.auth import get_requester, get_readable_document, get_writable_document
from app.core.config import settings
from app.core.db import get_db
from app.domains.access.roles import RequesterContext
from app.domains.documents.entities import Document
from app.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentListItem,
    DocumentListResponse, MessageResponse
)
from app.domains.documents.services import DocumentService

router = APIRouter(prefix="/documents", tags=["documents"])


def page_response(documents, metadata) -> DocumentListResponse:
    return DocumentListResponse(
        items=[DocumentListItem.model_validate(doc) for doc in documents],
        metadata=metadata
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)
    document = await document_service.create_document(document_data, requester.id)
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    query: Optional[str] = Query(None, max_length=100),
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
):
    """Список доступных документов; с непустым query - поиск по заголовку"""
    document_service = DocumentService(db)

    # Пустой запрос - это обычный список, а не поиск
    if query and query.strip():
        documents, metadata = await document_service.search_documents(
            requester, query.strip(), limit=limit, offset=offset
        )
    else:
        documents, metadata = await document_service.list_documents(
            requester, limit=limit, offset=offset
        )

    return page_response(documents, metadata)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document: Document = Depends(get_readable_document),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по id"""
    document_service = DocumentService(db)
    return DocumentResponse.model_validate(document_service.retrieve_document(document))


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    update_data: DocumentUpdate,
    document: Document = Depends(get_writable_document),
    db: AsyncSession = Depends(get_db)
):
    """Частичное обновление документа"""
    document_service = DocumentService(db)
    updated = await document_service.update_document(document, update_data)
    return DocumentResponse.model_validate(updated)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document: Document = Depends(get_writable_document),
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    document_service = DocumentService(db)
    return await document_service.delete_document(document)
