from typing import Optional, List, Tuple, Dict, Any, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.orm import defer, joinedload
import uuid

from app.core.errors import ValidationError
from app.db.models.document import Document as DocumentModel
from app.db.models.user import User as UserModel
from app.domains.documents.entities import OwnerSummary

if TYPE_CHECKING:
    from app.domains.access.predicates import Predicate
    from app.domains.documents.entities import Document


def _owner_projection():
    return joinedload(DocumentModel.owner).load_only(
        UserModel.id, UserModel.name, UserModel.role_level
    )


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            id=document.id,
            title=document.title,
            content=document.content,
            type=document.type,
            visibility=document.visibility,
            threshold=document.threshold,
            owner_id=document.owner_id
        )
        db_document.check_body()

        self.session.add(db_document)
        await self.session.commit()
        return await self.get_by_id(db_document.id)

    async def get_by_id(self, document_id: uuid.UUID) -> Optional["Document"]:
        """Получение документа целиком, вместе с владельцем"""
        result = await self.session.execute(
            select(DocumentModel)
            .options(_owner_projection())
            .where(DocumentModel.id == document_id)
            .execution_options(populate_existing=True)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def find_page(
        self,
        predicate: "Predicate",
        limit: int,
        offset: int
    ) -> Tuple[List["Document"], int]:
        """
        Страница документов, подходящих под предикат, и общее их количество.

        Тело документа в списки не загружается.
        """
        where = predicate.to_clause(DocumentModel)

        total = await self.session.scalar(
            select(func.count(DocumentModel.id)).where(where)
        )

        result = await self.session.execute(
            select(DocumentModel)
            .options(defer(DocumentModel.content), _owner_projection())
            .where(where)
            .order_by(DocumentModel.updated_at.desc(), DocumentModel.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        db_documents = result.scalars().all()
        return [self._to_domain(doc, with_content=False) for doc in db_documents], total or 0

    async def update(self, document_id: uuid.UUID, changes: Dict[str, Any]) -> Optional["Document"]:
        """Частичное обновление: меняются только переданные поля"""
        db_document = await self.session.get(DocumentModel, document_id)

        if db_document is None:
            return None

        try:
            for field, value in changes.items():
                setattr(db_document, field, value)
            db_document.check_body()
        except ValidationError:
            await self.session.rollback()
            raise

        await self.session.commit()
        return await self.get_by_id(document_id)

    async def delete(self, document_id: uuid.UUID) -> bool:
        """Удаление документа"""
        stmt = delete(DocumentModel).where(DocumentModel.id == document_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_document: DocumentModel, with_content: bool = True) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.documents.entities import Document

        owner = db_document.owner
        return Document(
            id=db_document.id,
            title=db_document.title,
            owner_id=db_document.owner_id,
            content=db_document.content if with_content else None,
            type=db_document.type,
            visibility=db_document.visibility,
            threshold=db_document.threshold,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at,
            owner=OwnerSummary(id=owner.id, name=owner.name, role_level=owner.role_level) if owner else None
        )
