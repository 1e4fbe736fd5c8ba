"""Uniform response envelopes returned by services.

A response carries either data or one or more errors. Callers branch on
``success`` (no errors) rather than catching exceptions.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from codity.repositories.paging import PagedList

T = TypeVar("T")


class Error(BaseModel):
    """A single domain error."""

    message: str


class BaseResponse(BaseModel):
    """Envelope with no payload."""

    errors: list[Error] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(Error(message=message))


class Response(BaseResponse, Generic[T]):
    """Envelope around a single model."""

    model: T | None = None


class PagedResponse(BaseResponse, Generic[T]):
    """Envelope around one page of models plus page info."""

    models: list[T] = Field(default_factory=list)
    total_count: int = 0
    page_size: int = 0
    current_page: int = 0
    total_pages: int = 0

    def set_page_info(self, paged: PagedList) -> None:
        """Copy paging metadata from a PagedList."""
        self.total_count = paged.total_count
        self.page_size = paged.page_size
        self.current_page = paged.current_page
        self.total_pages = paged.total_pages
