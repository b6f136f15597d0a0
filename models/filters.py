"""
models/filters.py
-----------------
Pagination and sorting parameters for list queries.

The sort column and direction are spliced into SQL as identifiers, which
cannot be bound as parameters. The per-resource allow-list is therefore the
only thing standing between request input and the query text.
"""

import math
from dataclasses import dataclass

from utils.validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100
DESCENDING_MARKER = "-"


class UnsafeSortError(AssertionError):
    """A sort value outside the allow-list reached query construction."""


@dataclass(frozen=True)
class Filters:
    """
    Attributes:
        page: 1-based page number.
        page_size: Records per page.
        sort: Requested sort key, optionally prefixed with ``-`` for descending.
        sort_safelist: Every sort key the target resource accepts.
    """
    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id",)

    def _safe_sort(self) -> str:
        """
        Raises:
            UnsafeSortError: If ``sort`` is not in the allow-list, which means
                ``validate_filters`` was skipped.
        """
        if self.sort not in self.sort_safelist:
            raise UnsafeSortError(f"unsafe sort parameter: {self.sort}")
        return self.sort

    def sort_column(self) -> str:
        return self._safe_sort().removeprefix(DESCENDING_MARKER)

    def sort_direction(self) -> str:
        if self._safe_sort().startswith(DESCENDING_MARKER):
            return "DESC"
        return "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def validate_filters(v: Validator, f: Filters) -> None:
    v.check(f.page > 0, "page", "must be greater than zero")
    v.check(f.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(f.page_size > 0, "page_size", "must be greater than zero")
    v.check(f.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
    v.check(permitted_value(f.sort, *f.sort_safelist), "sort", "invalid sort value")


@dataclass(frozen=True)
class Metadata:
    """Pagination details returned alongside a list of records."""
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    def to_dict(self) -> dict:
        return {
            "current_page": self.current_page,
            "page_size": self.page_size,
            "first_page": self.first_page,
            "last_page": self.last_page,
            "total_records": self.total_records,
        }


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()
    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
