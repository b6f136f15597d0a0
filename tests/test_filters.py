"""
Unit tests for pagination/sort filters.

Tests cover:
- Page and page size bounds
- Sort allow-list enforcement
- Derived column, direction, limit and offset
- Pagination metadata
"""

import pytest

from models.filters import (
    Filters,
    Metadata,
    UnsafeSortError,
    calculate_metadata,
    validate_filters,
)
from utils.validator import ValidationFailed, Validator

SAFELIST = ("id", "title", "year", "-id", "-title", "-year")


def _validate(f: Filters) -> Validator:
    v = Validator()
    validate_filters(v, f)
    return v


def test_descending_year_scenario():
    f = Filters(page=1, page_size=20, sort="-year", sort_safelist=SAFELIST)
    assert _validate(f).valid
    assert f.sort_column() == "year"
    assert f.sort_direction() == "DESC"
    assert f.limit() == 20
    assert f.offset() == 0


def test_ascending_sort():
    f = Filters(page=1, page_size=20, sort="title", sort_safelist=SAFELIST)
    assert f.sort_column() == "title"
    assert f.sort_direction() == "ASC"


@pytest.mark.parametrize(
    "page, page_size, offset",
    [(1, 1, 0), (2, 20, 20), (3, 100, 200), (10_000_000, 100, 999_999_900)],
)
def test_limit_and_offset(page, page_size, offset):
    f = Filters(page=page, page_size=page_size, sort="id", sort_safelist=SAFELIST)
    assert _validate(f).valid
    assert f.limit() == page_size
    assert f.offset() == offset


@pytest.mark.parametrize("page", [0, -1, 10_000_001])
def test_page_out_of_range(page):
    v = _validate(Filters(page=page, page_size=20, sort="id", sort_safelist=SAFELIST))
    assert set(v.errors) == {"page"}


@pytest.mark.parametrize("page_size", [0, 101])
def test_page_size_out_of_range(page_size):
    v = _validate(Filters(page=1, page_size=page_size, sort="id", sort_safelist=SAFELIST))
    assert set(v.errors) == {"page_size"}


@pytest.mark.parametrize("sort", ["runtime", "year DESC", "-year; DROP TABLE movies", "--year", ""])
def test_sort_outside_safelist_is_invalid(sort):
    f = Filters(page=1, page_size=20, sort=sort, sort_safelist=SAFELIST)
    v = _validate(f)
    assert v.errors == {"sort": "invalid sort value"}
    with pytest.raises(UnsafeSortError):
        f.sort_column()
    with pytest.raises(UnsafeSortError):
        f.sort_direction()


def test_unsafe_sort_is_not_a_validation_failure():
    assert not issubclass(UnsafeSortError, ValidationFailed)
    assert issubclass(UnsafeSortError, AssertionError)


def test_every_failure_is_reported_together():
    v = _validate(Filters(page=0, page_size=0, sort="nope", sort_safelist=SAFELIST))
    assert set(v.errors) == {"page", "page_size", "sort"}


def test_filters_are_immutable():
    f = Filters(sort_safelist=SAFELIST)
    with pytest.raises(AttributeError):
        f.sort = "-year"


class TestMetadata:
    def test_empty_result(self):
        assert calculate_metadata(0, 3, 20) == Metadata()

    def test_partial_last_page(self):
        meta = calculate_metadata(45, 2, 20)
        assert meta == Metadata(
            current_page=2, page_size=20, first_page=1, last_page=3, total_records=45
        )

    def test_exact_last_page(self):
        assert calculate_metadata(40, 1, 20).last_page == 2

    def test_to_dict(self):
        assert calculate_metadata(1, 1, 5).to_dict() == {
            "current_page": 1,
            "page_size": 5,
            "first_page": 1,
            "last_page": 1,
            "total_records": 1,
        }
