"""
Ошибки уровня приложения.

Каждая ошибка знает свой HTTP статус; обработчик в app.main превращает их
в JSON ответы вида {"message": ..., "errors": [...]}.
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class DocShareError(Exception):
    """Базовая ошибка DocShare"""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(DocShareError):
    """Некорректные данные для создания или обновления"""

    status_code = 400
    default_message = "Validation failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[f"{field}: {message}"])

    @classmethod
    def from_request_errors(cls, errors: List[dict]) -> "ValidationError":
        """Ошибки разбора запроса FastAPI в том же формате, что и ошибки хранилища"""
        messages = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            field = ".".join(loc) or "body"
            messages.append(f"{field}: {error.get('msg', 'invalid value')}")
        return cls(errors=messages)


class NotFound(DocShareError):
    status_code = 404
    default_message = "Not found"


class MalformedIdentifier(DocShareError):
    status_code = 400
    default_message = "Invalid ID"


class PermissionDenied(DocShareError):
    status_code = 403
    default_message = "You don't have access to this resource"


class AuthenticationError(DocShareError):
    status_code = 401
    default_message = "Could not validate credentials"


class StoreError(DocShareError):
    """Сбой хранилища; детали пишутся в лог, но не отдаются клиенту"""

    status_code = 500
    default_message = "An unexpected error occurred"


@asynccontextmanager
async def translate_store_errors(operation: str):
    """Преобразование ошибок SQLAlchemy в ошибки домена"""
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"Integrity error during {operation}: {e.orig}")
        raise ValidationError("Invalid reference or duplicate value") from e
    except SQLAlchemyError as e:
        logger.exception(f"Store failure during {operation}")
        raise StoreError() from e
