import math
from dataclasses import dataclass

from pydantic import BaseModel

from app.core.errors import ValidationError


class PageMetadata(BaseModel):
    """Метаданные страницы списка"""
    current_page: int
    page_size: int
    total_count: int
    total_pages: int


@dataclass(frozen=True)
class ListOptions:
    """Окно выборки: limit/offset"""
    limit: int
    offset: int = 0

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ValidationError.for_field("limit", "limit must be a positive integer")
        if isinstance(self.offset, bool) or not isinstance(self.offset, int) or self.offset < 0:
            raise ValidationError.for_field("offset", "offset must be a non-negative integer")


def paginate(total_count: int, limit: int, offset: int) -> PageMetadata:
    """
    Подсчет метаданных страницы.

    Номер страницы не ограничивается сверху: запрос за пределами списка
    получает пустую страницу с "честным" номером.
    """
    return PageMetadata(
        current_page=offset // limit + 1,
        page_size=limit,
        total_count=total_count,
        total_pages=math.ceil(total_count / limit),
    )
