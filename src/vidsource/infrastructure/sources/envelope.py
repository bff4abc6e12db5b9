"""Decoder for the platform's generic ``{code, message, data}`` JSON envelope.

Bilibili wraps every API payload the same way, but the payload key differs
between the UGC endpoints (``data``) and the PGC/series endpoints
(``result``).  Both aliases are accepted.

Known codes:
    0     success
    -400  invalid request parameter
    -404  resource not found
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from vidsource.domain.exceptions import NoSuchResourceError, RemoteRequestError

log = structlog.get_logger(__name__)

T = TypeVar("T")

CODE_OK = 0
CODE_INVALID_PARAMETER = -400
CODE_NOT_FOUND = -404


class ApiEnvelope(BaseModel):
    """Response envelope, independent of payload shape."""

    code: int
    message: str = ""
    payload: Any = Field(
        default=None,
        validation_alias=AliasChoices("data", "result"),
    )


def parse_envelope(body: Any, url: str) -> ApiEnvelope:
    """Validate the raw JSON body as an envelope."""
    try:
        return ApiEnvelope.model_validate(body)
    except ValidationError as exc:
        log.warning("api_envelope_malformed", url=url, errors=exc.error_count())
        raise RemoteRequestError("malformed response envelope", url=url) from exc


def _check_code(envelope: ApiEnvelope, url: str) -> None:
    if envelope.code == CODE_OK:
        return
    log.warning(
        "api_error_code",
        url=url,
        code=envelope.code,
        message=envelope.message,
    )
    if envelope.code == CODE_NOT_FOUND:
        raise NoSuchResourceError(url)
    # -400 and every other non-zero code carry the remote message verbatim
    raise RemoteRequestError(envelope.message, url=url, code=envelope.code)


def _validate_payload(payload: Any, payload_type: type[T], url: str) -> T:
    try:
        return TypeAdapter(payload_type).validate_python(payload)
    except ValidationError as exc:
        log.warning(
            "api_payload_invalid",
            url=url,
            payload_type=getattr(payload_type, "__name__", str(payload_type)),
            errors=exc.error_count(),
        )
        raise NoSuchResourceError(url) from exc


def decode_envelope(body: Any, url: str, payload_type: type[T]) -> T:
    """Decode *body* for a call site that requires a payload.

    A successful code with no payload is reported as ``NoSuchResourceError``
    using *url* as context.
    """
    envelope = parse_envelope(body, url)
    _check_code(envelope, url)
    if envelope.payload is None:
        log.warning("api_payload_missing", url=url)
        raise NoSuchResourceError(url)
    return _validate_payload(envelope.payload, payload_type, url)


def decode_nullable_envelope(body: Any, url: str, payload_type: type[T]) -> T | None:
    """Decode *body* for a call site where an absent payload is acceptable."""
    envelope = parse_envelope(body, url)
    _check_code(envelope, url)
    if envelope.payload is None:
        return None
    return _validate_payload(envelope.payload, payload_type, url)
