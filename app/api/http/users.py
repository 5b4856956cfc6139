from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.http.documents import page_response
from app.core.auth import get_requester, parse_identifier
from app.core.config import settings
from app.core.db import get_db
from app.domains.access.roles import RequesterContext
from app.domains.documents.schemas import DocumentListResponse, MessageResponse
from app.domains.documents.services import DocumentService
from app.domains.identity.schemas import UserCreate, UserResponse
from app.domains.identity.services import IdentityService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)
    user = await identity_service.register_user(user_data)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
):
    """Мягкое удаление пользователя"""
    identity_service = IdentityService(db)
    await identity_service.delete_user(requester, parse_identifier(user_id))
    return {"message": "User deleted successfully"}


@router.get("/{user_id}/documents", response_model=DocumentListResponse)
async def get_user_documents(
    user_id: str,
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    requester: RequesterContext = Depends(get_requester),
    db: AsyncSession = Depends(get_db)
):
    """Получение документов пользователя, доступных автору запроса"""
    document_service = DocumentService(db)

    documents, metadata = await document_service.list_user_documents(
        requester,
        parse_identifier(user_id),
        limit=limit,
        offset=offset
    )

    return page_response(documents, metadata)
