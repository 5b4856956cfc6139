"""
Автосохранение документа из редактора.

Редактор копит изменения атрибутов (заголовок, видимость, порог роли) и
дельты содержимого. Раз в interval секунд flush() решает, что отправить:
ничего, создание документа целиком или частичное обновление только
изменившихся полей.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Dict, Generic, Optional, Set, TypeVar, Union

from app.client.delta import Delta
from app.client.gateway import DocumentGateway
from app.client.scheduler import Scheduler, TimerHandle
from app.domains.access.roles import RoleLevel
from app.domains.documents.entities import ContentType, Visibility

logger = logging.getLogger(__name__)

AUTOSAVE_INTERVAL = 10.0

STATUS_SAVING = "Saving changes..."
STATUS_SAVED = "All changes saved to cloud"
STATUS_FAILED = "Failed to save changes"

T = TypeVar("T")


class SaveState(Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SYNCING = "syncing"


class ResetPolicy(Enum):
    """
    Когда сбрасывать базовую линию после отправки.

    ON_ISSUE - сразу при отправке (неудачное сохранение теряется),
    ON_SUCCESS - только после подтверждения; при ошибке изменения
    возвращаются в накопитель и уходят при следующем срабатывании.
    """
    ON_ISSUE = "on_issue"
    ON_SUCCESS = "on_success"


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


class _Absent:
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

FieldValue = Union[Present[T], _Absent]


@dataclass(frozen=True)
class DocumentPatch:
    """Частичное обновление: поле либо передано (Present), либо отсутствует"""
    title: FieldValue[str] = ABSENT
    visibility: FieldValue[str] = ABSENT
    threshold: FieldValue[int] = ABSENT
    content: FieldValue[str] = ABSENT

    def is_empty(self) -> bool:
        return not self.to_payload()

    def to_payload(self) -> Dict[str, Any]:
        return {
            name: field.value
            for name, field in (
                ("title", self.title),
                ("visibility", self.visibility),
                ("threshold", self.threshold),
                ("content", self.content),
            )
            if isinstance(field, Present)
        }


@dataclass(frozen=True)
class EditorAttributes:
    """Редактируемые атрибуты документа"""
    title: str = ""
    visibility: Visibility = Visibility.PRIVATE
    threshold: int = RoleLevel.REGULAR

    def diff(self, baseline: "EditorAttributes") -> DocumentPatch:
        """Патч из атрибутов, отличающихся от baseline"""
        return DocumentPatch(
            title=Present(self.title) if self.title != baseline.title else ABSENT,
            visibility=Present(self.visibility.value) if self.visibility != baseline.visibility else ABSENT,
            threshold=Present(int(self.threshold)) if self.threshold != baseline.threshold else ABSENT,
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "EditorAttributes":
        return cls(
            title=document.get("title", ""),
            visibility=Visibility(document.get("visibility", Visibility.PRIVATE)),
            threshold=document.get("threshold", RoleLevel.REGULAR),
        )


def load_contents(document: Dict[str, Any]) -> Delta:
    """Содержимое документа как дельта: quill - JSON дельты, иначе простой текст"""
    content = document.get("content") or ""
    if document.get("type", ContentType.QUILL.value) == ContentType.QUILL.value:
        return Delta.from_json(content)
    return Delta().insert(content)


class AutosaveReconciler:
    """Синхронизация сессии редактирования с удаленным хранилищем"""

    def __init__(
        self,
        gateway: DocumentGateway,
        scheduler: Scheduler,
        document: Optional[Dict[str, Any]] = None,
        interval: float = AUTOSAVE_INTERVAL,
        reset_policy: ResetPolicy = ResetPolicy.ON_SUCCESS
    ):
        self.gateway = gateway
        self.scheduler = scheduler
        self.interval = interval
        self.reset_policy = reset_policy

        if document:
            self.document_id: Optional[uuid.UUID] = uuid.UUID(str(document["id"]))
            self.attributes = EditorAttributes.from_document(document)
            self.contents = load_contents(document)
        else:
            self.document_id = None
            self.attributes = EditorAttributes()
            self.contents = Delta()

        self.initial_attributes = self.attributes
        self.pending_delta = Delta()
        self.status = ""

        self._timer: Optional[TimerHandle] = None
        self._tasks: Set[asyncio.Future] = set()
        self._create_issued = False
        self._closed = False

    # Жизненный цикл

    def start(self) -> None:
        if self._timer is None and not self._closed:
            self._timer = self.scheduler.call_every(self.interval, self.flush)

    def close(self) -> None:
        """Остановка автосохранения; ответы, пришедшие позже, игнорируются"""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def delete(self) -> None:
        """Удаление документа; сессия после этого закрыта"""
        self.close()
        if self.document_id is not None:
            await self.gateway.delete(self.document_id)
        elif self._create_issued:
            # id еще не пришел, созданный документ останется на сервере
            logger.warning("Editor deleted while its document was still being created; the remote copy is kept")

    async def wait_idle(self) -> None:
        """Ожидание завершения отправленных сохранений"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @property
    def closed(self) -> bool:
        return self._closed

    # Правки

    def set_title(self, title: str) -> None:
        self.attributes = replace(self.attributes, title=title)

    def set_visibility(self, visibility: Union[Visibility, str]) -> None:
        self.attributes = replace(self.attributes, visibility=Visibility(visibility))

    def set_threshold(self, threshold: int) -> None:
        self.attributes = replace(self.attributes, threshold=int(threshold))

    def apply_content_change(self, delta: Delta) -> None:
        self.contents = self.contents.compose(delta)
        self.pending_delta = self.pending_delta.compose(delta)

    @property
    def has_changes(self) -> bool:
        return self.attributes != self.initial_attributes or self.pending_delta.length() > 0

    @property
    def state(self) -> SaveState:
        if self._tasks:
            return SaveState.SYNCING
        return SaveState.DIRTY if self.has_changes else SaveState.CLEAN

    # Синхронизация

    def flush(self) -> Optional[asyncio.Future]:
        """Одно срабатывание таймера; возвращает задачу отправки, если она была"""
        if self._closed or not self.has_changes:
            return None

        # Создание уже отправлено, а id еще не получен
        if self.document_id is None and self._create_issued:
            return None

        if self.reset_policy is ResetPolicy.ON_SUCCESS and self._tasks:
            return None

        self.status = STATUS_SAVING
        attributes = self.attributes
        creating = self.document_id is None

        if creating:
            self._create_issued = True
            call = self.gateway.create(self._create_payload(attributes))
        else:
            patch = attributes.diff(self.initial_attributes)
            if self.pending_delta.length() > 0:
                patch = replace(patch, content=Present(self.contents.to_json()))
            call = self.gateway.update(self.document_id, patch.to_payload())

        flushed_delta = self.pending_delta
        self.pending_delta = Delta()
        if self.reset_policy is ResetPolicy.ON_ISSUE:
            self.initial_attributes = attributes

        task = asyncio.ensure_future(self._complete(call, attributes, flushed_delta, creating))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _create_payload(self, attributes: EditorAttributes) -> Dict[str, Any]:
        return {
            "title": attributes.title,
            "content": self.contents.to_json(),
            "type": ContentType.QUILL.value,
            "visibility": attributes.visibility.value,
            "threshold": int(attributes.threshold),
        }

    async def _complete(
        self,
        call: Awaitable[Dict[str, Any]],
        attributes: EditorAttributes,
        flushed_delta: Delta,
        creating: bool
    ) -> None:
        try:
            response = await call
        except Exception as e:
            if creating:
                self._create_issued = False
            if self._closed:
                return
            logger.warning(f"Autosave failed for document {self.document_id}: {e}")
            self.status = STATUS_FAILED
            if self.reset_policy is ResetPolicy.ON_SUCCESS:
                self.pending_delta = flushed_delta.compose(self.pending_delta)
            return

        if self._closed:
            logger.debug("Autosave response arrived after the editor was closed; ignored")
            return

        if creating:
            self.document_id = uuid.UUID(str(response["id"]))
            logger.info(f"Document {self.document_id} created by autosave")

        if self.reset_policy is ResetPolicy.ON_SUCCESS:
            self.initial_attributes = attributes
        self.status = STATUS_SAVED
