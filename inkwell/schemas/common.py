"""Common Schemas — camelCase base model, response envelope, pagination envelope.

Invariants:
    - Every response body is {success, data} (failures are built by core/errors.py)
    - JSON uses camelCase; requests also accept snake_case field names
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from inkwell.core.pagination import PageMeta

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for all API schemas: camelCase aliases, populate by field name too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(ApiModel, Generic[T]):
    success: bool = True
    data: T


class PageMetaResponse(ApiModel):
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_meta(cls, meta: PageMeta) -> "PageMetaResponse":
        return cls(
            total=meta.total, page=meta.page,
            limit=meta.limit, total_pages=meta.total_pages,
        )


class PageResponse(ApiModel, Generic[T]):
    items: list[T]
    meta: PageMetaResponse
