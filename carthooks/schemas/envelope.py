"""
Decoding of the JSON response envelope shared by every endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ValidationError

from carthooks.schemas.result import Result


class EnvelopeError(BaseModel):
    message: str = ""
    code: Optional[Union[str, int]] = None


class Envelope(BaseModel):
    """``{data?, error?{message, code}, trace_id?, meta?}``"""

    data: Any = None
    error: Optional[EnvelopeError] = None
    trace_id: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


def parse_envelope(body: Union[bytes, str], status_code: Optional[int] = None) -> Result:
    """Turn a raw response body into a Result.

    The HTTP status is recorded but not consulted: the envelope's ``error``
    member alone decides failure. Bodies that are not a JSON object of the
    envelope shape produce a failed Result carrying the raw text verbatim.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    try:
        envelope = Envelope.model_validate_json(text)
    except ValidationError:
        return Result.failure(text, status_code=status_code)

    if envelope.error is not None:
        code = envelope.error.code
        return Result.failure(
            envelope.error.message,
            code=str(code) if code is not None else None,
            trace_id=envelope.trace_id,
            meta=envelope.meta,
            status_code=status_code,
        )

    return Result.ok(
        envelope.data,
        trace_id=envelope.trace_id,
        meta=envelope.meta,
        status_code=status_code,
    )


__all__ = ["Envelope", "EnvelopeError", "parse_envelope"]
