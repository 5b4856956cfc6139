import logging
import uuid
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, translate_store_errors
from app.core.pagination import ListOptions, PageMetadata, paginate
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.access.predicates import (
    Predicate, visible_documents, user_documents, matching_title
)
from app.domains.access.roles import RequesterContext
from app.domains.documents.entities import Document
from app.domains.documents.schemas import DocumentCreate, DocumentUpdate

logger = logging.getLogger(__name__)

DocumentPage = Tuple[List[Document], PageMetadata]


class DocumentService:
    """Сервис для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.user_repository = UserRepository(session)

    async def create_document(self, document_data: DocumentCreate, owner_id: uuid.UUID) -> Document:
        """Создание нового документа"""
        document = Document.create_document(
            title=document_data.title,
            owner_id=owner_id,
            content=document_data.content,
            type=document_data.type,
            visibility=document_data.visibility,
            threshold=document_data.threshold
        )

        async with translate_store_errors("create document"):
            created = await self.document_repository.create(document)

        logger.info(f"Document {created.id} created by user {owner_id}")
        return created

    async def list_documents(
        self,
        requester: RequesterContext,
        limit: int,
        offset: int = 0
    ) -> DocumentPage:
        """Все документы, доступные автору запроса"""
        return await self._page(visible_documents(requester), limit, offset, "list documents")

    async def list_user_documents(
        self,
        requester: RequesterContext,
        user_id: uuid.UUID,
        limit: int,
        offset: int = 0
    ) -> DocumentPage:
        """Документы конкретного пользователя, доступные автору запроса"""
        async with translate_store_errors("look up document owner"):
            user = await self.user_repository.get_by_id(user_id, include_deleted=True)

        if user is None:
            raise NotFound("User not found")

        if not user.is_visible_to(requester):
            raise NotFound("This user has been deleted")

        return await self._page(
            user_documents(requester, user_id), limit, offset, "list user documents"
        )

    async def search_documents(
        self,
        requester: RequesterContext,
        query: str,
        limit: int,
        offset: int = 0
    ) -> DocumentPage:
        """Поиск по заголовку среди доступных документов"""
        return await self._page(matching_title(requester, query), limit, offset, "search documents")

    def retrieve_document(self, document: Document) -> Document:
        """Документ уже найден и проверен слоем авторизации"""
        return document

    async def update_document(self, document: Document, update_data: DocumentUpdate) -> Document:
        """Частичное обновление документа"""
        changes = update_data.changes()

        async with translate_store_errors("update document"):
            updated = await self.document_repository.update(document.id, changes)

        if updated is None:
            raise NotFound("Document not found")

        logger.info(f"Document {document.id} updated: {sorted(changes)}")
        return updated

    async def delete_document(self, document: Document) -> dict:
        """Удаление документа"""
        async with translate_store_errors("delete document"):
            deleted = await self.document_repository.delete(document.id)

        if not deleted:
            raise NotFound("Document not found")

        logger.info(f"Document {document.id} deleted")
        return {"message": "Document deleted successfully"}

    async def _page(
        self,
        predicate: Predicate,
        limit: int,
        offset: int,
        operation: str
    ) -> DocumentPage:
        options = ListOptions(limit, offset)
        async with translate_store_errors(operation):
            documents, total = await self.document_repository.find_page(
                predicate, options.limit, options.offset
            )
        return documents, paginate(total, options.limit, options.offset)
