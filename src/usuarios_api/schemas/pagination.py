"""Generic pagination types shared by all list endpoints.

PaginatedResponse[T] — Pydantic model for HTTP responses (serializable).
Paginated[T]         — plain dataclass for service-layer returns (not serializable).

Pages are zero-based: page 0 holds the first ``size`` items.
"""

from dataclasses import dataclass

from pydantic import BaseModel


class PaginatedResponse[T](BaseModel):
    """Pydantic page envelope used at the HTTP boundary.

    ``from_attributes`` lets ``model_validate`` read a ``Paginated`` dataclass
    directly::

        UserPage = PaginatedResponse[UserResponse]
        return UserPage.model_validate(result)
    """

    model_config = {"from_attributes": True}

    items: list[T]
    total: int
    page: int
    size: int
    total_pages: int


@dataclass
class Paginated[T]:
    """Page of results inside the service layer."""

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.size) if self.size else 0
