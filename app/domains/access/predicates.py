"""
Предикаты видимости документов.

Предикат строится один раз и вычисляется двумя способами:
to_clause() превращает его в условие WHERE для SQLAlchemy,
matches() проверяет одну уже загруженную запись.
"""
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from sqlalchemy import and_, or_, true

from app.domains.access.roles import RequesterContext, is_admin_or_higher, is_self
from app.domains.documents.entities import Visibility


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class Predicate(ABC):
    """Узел дерева условий"""

    @abstractmethod
    def to_clause(self, model):
        ...

    @abstractmethod
    def matches(self, record: Any) -> bool:
        ...

    def __and__(self, other: "Predicate") -> "Predicate":
        return AllOf(self, other)

    def __or__(self, other: "Predicate") -> "Predicate":
        return AnyOf(self, other)


class MatchAll(Predicate):
    def to_clause(self, model):
        return true()

    def matches(self, record: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "MatchAll()"


class FieldEquals(Predicate):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = _plain(value)

    def to_clause(self, model):
        return getattr(model, self.field) == self.value

    def matches(self, record: Any) -> bool:
        return _plain(getattr(record, self.field)) == self.value

    def __repr__(self) -> str:
        return f"FieldEquals({self.field}={self.value!r})"


class FieldAtMost(Predicate):
    """field <= value"""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = _plain(value)

    def to_clause(self, model):
        return getattr(model, self.field) <= self.value

    def matches(self, record: Any) -> bool:
        current = _plain(getattr(record, self.field))
        return current is not None and current <= self.value

    def __repr__(self) -> str:
        return f"FieldAtMost({self.field}<={self.value!r})"


class FieldContains(Predicate):
    """Регистронезависимый поиск подстроки"""

    def __init__(self, field: str, text: str):
        self.field = field
        self.text = text

    def to_clause(self, model):
        return getattr(model, self.field).icontains(self.text, autoescape=True)

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field) or ""
        return self.text.lower() in current.lower()

    def __repr__(self) -> str:
        return f"FieldContains({self.field}~{self.text!r})"


class AllOf(Predicate):
    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def to_clause(self, model):
        return and_(*(p.to_clause(model) for p in self.predicates))

    def matches(self, record: Any) -> bool:
        return all(p.matches(record) for p in self.predicates)

    def __repr__(self) -> str:
        return f"AllOf{self.predicates!r}"


class AnyOf(Predicate):
    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def to_clause(self, model):
        return or_(*(p.to_clause(model) for p in self.predicates))

    def matches(self, record: Any) -> bool:
        return any(p.matches(record) for p in self.predicates)

    def __repr__(self) -> str:
        return f"AnyOf{self.predicates!r}"


def _shared_with(requester: RequesterContext) -> Predicate:
    """Публичные документы и документы, чей порог роли пройден"""
    return AnyOf(
        FieldEquals("visibility", Visibility.PUBLIC),
        AllOf(
            FieldEquals("visibility", Visibility.ROLE),
            FieldAtMost("threshold", requester.effective_role),
        ),
    )


def visible_documents(requester: RequesterContext) -> Predicate:
    """Все документы, которые может видеть автор запроса"""
    if is_admin_or_higher(requester):
        return MatchAll()

    return AnyOf(
        *_shared_with(requester).predicates,
        FieldEquals("owner_id", requester.id),
    )


def user_documents(requester: RequesterContext, user_id: uuid.UUID) -> Predicate:
    """Документы конкретного пользователя, видимые автору запроса"""
    owned = FieldEquals("owner_id", user_id)
    if is_admin_or_higher(requester) or is_self(requester, user_id):
        return owned
    # Владелец здесь - целевой пользователь, а не автор запроса
    return owned & _shared_with(requester)


def matching_title(requester: RequesterContext, query: str) -> Predicate:
    """Видимые документы, в заголовке которых есть query"""
    return visible_documents(requester) & FieldContains("title", query)
