"""
The uniform outcome of every API call.

``data`` arrives as an untyped JSON tree. Typed access goes through a
structural round trip (JSON encode, then validate into the requested shape)
so callers never receive an unchecked cast.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from carthooks.core.errors import (
    DecodeMismatchError,
    NoDataError,
    NotSuccessfulError,
    WrongScalarTypeError,
)
from carthooks.schemas.records import PaginationMeta, Record

T = TypeVar("T")

_INTEGER_STRING = re.compile(r"[+-]?[0-9]+")


class Result(BaseModel):
    """Immutable result of one API call."""

    model_config = ConfigDict(frozen=True)

    success: bool
    data: Any = None
    error_message: str = ""
    error_code: Optional[str] = None
    trace_id: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    status_code: Optional[int] = None

    @classmethod
    def ok(cls, data: Any = None, **kwargs: Any) -> "Result":
        return cls(success=True, data=data, **kwargs)

    @classmethod
    def failure(cls, message: str, code: Optional[str] = None, **kwargs: Any) -> "Result":
        return cls(success=False, error_message=message, error_code=code, **kwargs)

    def __str__(self) -> str:
        return (
            f"CarthooksResult(success={self.success}, data={self.data!r}, "
            f"error={self.error_message})"
        )

    def has_error(self) -> bool:
        return not self.success or bool(self.error_message)

    @property
    def error(self) -> str:
        """The error message, or an empty string when the call succeeded."""
        return self.error_message if self.has_error() else ""

    def _require_success(self) -> None:
        if not self.success:
            raise NotSuccessfulError(self.error_message)

    def extract_as(self, shape: Type[T]) -> T:
        """Decode ``data`` into ``shape`` (a model, or any type pydantic accepts)."""
        self._require_success()
        if self.data is None:
            raise NoDataError()
        try:
            raw = json.dumps(self.data)
            return TypeAdapter(shape).validate_json(raw)
        except (TypeError, ValueError, ValidationError) as exc:
            raise DecodeMismatchError(f"failed to decode data: {exc}") from exc

    def extract_records(self) -> List[Record]:
        return self.extract_as(List[Record])

    def extract_record(self) -> Record:
        return self.extract_as(Record)

    def extract_string(self) -> str:
        self._require_success()
        if isinstance(self.data, str):
            return self.data
        raise WrongScalarTypeError("string")

    def extract_int(self) -> int:
        """Return ``data`` as an int; base-10 numeric strings are accepted."""
        self._require_success()
        value = self.data
        if isinstance(value, bool):
            raise WrongScalarTypeError("integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and _INTEGER_STRING.fullmatch(value.strip()):
            return int(value.strip())
        raise WrongScalarTypeError("integer")

    def extract_bool(self) -> bool:
        self._require_success()
        if isinstance(self.data, bool):
            return self.data
        raise WrongScalarTypeError("boolean")

    def extract_pagination(self) -> Optional[PaginationMeta]:
        """Return ``meta.pagination``, or ``None`` when the server sent none."""
        if not self.meta or self.meta.get("pagination") is None:
            return None
        try:
            raw = json.dumps(self.meta["pagination"])
            return PaginationMeta.model_validate_json(raw)
        except (TypeError, ValueError, ValidationError) as exc:
            raise DecodeMismatchError(f"malformed pagination metadata: {exc}") from exc


__all__ = ["Result"]
