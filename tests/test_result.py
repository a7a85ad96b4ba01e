from __future__ import annotations

from typing import Dict, List

import pytest
from pydantic import BaseModel

from carthooks.core.errors import (
    DecodeMismatchError,
    NoDataError,
    NotSuccessfulError,
    WrongScalarTypeError,
)
from carthooks.schemas.oauth import UserInfo
from carthooks.schemas.records import Record
from carthooks.schemas.result import Result

RECORD = {
    "id": 1,
    "title": "X",
    "created_at": 1700000000,
    "updated_at": 1700000100,
    "creator": 7,
    "fields": {"price": 9.5, "tags": ["a", "b"], "nested": {"k": None}},
}


def test_extract_record_preserves_all_fields() -> None:
    record = Result.ok(RECORD).extract_record()

    assert record.id == 1
    assert record.title == "X"
    assert record.model_dump() == RECORD


def test_extract_records_returns_a_list() -> None:
    second = dict(RECORD, id=2, fields={})

    records = Result.ok([RECORD, second]).extract_records()

    assert [record.id for record in records] == [1, 2]
    assert records[1].fields == {}


def test_extract_as_custom_model_and_generic_types() -> None:
    class Summary(BaseModel):
        total: int
        labels: List[str]

    assert Result.ok({"total": 3, "labels": ["x"]}).extract_as(Summary).total == 3
    assert Result.ok({"a": 1}).extract_as(Dict[str, int]) == {"a": 1}


def test_extract_as_user_info() -> None:
    data = {
        "user_id": 5,
        "username": "ada",
        "email": "ada@example.com",
        "tenant_id": 9,
        "is_admin": True,
        "scope": ["api:full"],
    }

    user = Result.ok(data).extract_as(UserInfo)

    assert user.user_id == 5
    assert user.is_admin is True
    assert user.scope == ["api:full"]


def test_extraction_on_failed_result_raises_not_successful() -> None:
    result = Result.failure("Item not found", code="NOT_FOUND")

    with pytest.raises(NotSuccessfulError, match="Item not found"):
        result.extract_record()
    with pytest.raises(NotSuccessfulError):
        result.extract_string()


def test_extraction_without_data_raises_no_data() -> None:
    with pytest.raises(NoDataError):
        Result.ok(None).extract_as(Record)


def test_extraction_shape_mismatch_raises_decode_mismatch() -> None:
    with pytest.raises(DecodeMismatchError):
        Result.ok({"title": "missing id"}).extract_record()
    with pytest.raises(DecodeMismatchError):
        Result.ok("plain string").extract_records()


def test_scalar_extraction() -> None:
    assert Result.ok("hello").extract_string() == "hello"
    assert Result.ok(True).extract_bool() is True

    with pytest.raises(WrongScalarTypeError):
        Result.ok(1).extract_string()
    with pytest.raises(WrongScalarTypeError):
        Result.ok("true").extract_bool()


@pytest.mark.parametrize(
    ("data", "expected"),
    [(42, 42), (42.0, 42), ("42", 42), ("-7", -7), (" 12 ", 12), ("9007199254740993", 9007199254740993)],
)
def test_extract_int_accepts_numbers_and_numeric_strings(data, expected) -> None:
    assert Result.ok(data).extract_int() == expected


@pytest.mark.parametrize("data", ["12abc", "1.5", "", "1_000", 1.5, True, None, [1]])
def test_extract_int_rejects_everything_else(data) -> None:
    with pytest.raises(WrongScalarTypeError):
        Result.ok(data).extract_int()


def test_has_error_covers_stray_error_message() -> None:
    assert Result.ok(1).has_error() is False
    assert Result.failure("boom").has_error() is True
    assert Result(success=True, error_message="stray").has_error() is True
    assert Result.ok(1).error == ""
    assert Result.failure("boom").error == "boom"


def test_pagination_is_optional() -> None:
    assert Result.ok([]).extract_pagination() is None
    assert Result.ok([], meta={"other": 1}).extract_pagination() is None


def test_pagination_is_decoded_from_meta() -> None:
    result = Result.ok(
        [], meta={"pagination": {"page": 2, "pageSize": 20, "total": 45, "totalPages": 3}}
    )

    pagination = result.extract_pagination()

    assert pagination is not None
    assert (pagination.page, pagination.page_size, pagination.total, pagination.total_pages) == (
        2,
        20,
        45,
        3,
    )


def test_malformed_pagination_raises() -> None:
    result = Result.ok([], meta={"pagination": {"page": "first"}})

    with pytest.raises(DecodeMismatchError):
        result.extract_pagination()


def test_result_is_immutable() -> None:
    result = Result.ok(1)

    with pytest.raises(Exception):
        result.success = False  # type: ignore[misc]


def test_string_representation() -> None:
    assert str(Result.failure("boom")) == "CarthooksResult(success=False, data=None, error=boom)"
