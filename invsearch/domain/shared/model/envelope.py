"""Tagged result type for inventory API responses.

The API wraps every payload as ``{"isFailed": bool, "data": ..., "message": ...}``.
Inside the client an envelope is always exactly one of ``Success`` or
``Failure``; consumers match on the two variants instead of probing fields.
"""

from typing import Any, Generic, Literal, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from invsearch.domain.shared.model.value import ValueObject

T = TypeVar("T")


class Success(ValueObject, Generic[T]):
    """Successful response carrying the payload."""

    kind: Literal["success"] = "success"
    data: T


class Failure(ValueObject):
    """Domain-level failure reported by the API."""

    kind: Literal["failure"] = "failure"
    message: str


Envelope: TypeAlias = Success[T] | Failure


class _WireEnvelope(BaseModel):
    """Envelope as sent over the wire, before it is narrowed to a variant."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_failed: bool | None = Field(default=None, alias="isFailed")
    is_success: bool | None = Field(default=None, alias="isSuccess")
    data: Any = None
    message: str | None = None


def parse_envelope(payload: Any, data_type: type[T]) -> "Success[T] | Failure":
    """Narrow a decoded JSON body into ``Success[data_type]`` or ``Failure``.

    Raises:
        pydantic.ValidationError: If the body is not an envelope or the
            success payload does not match ``data_type``.
    """
    wire = _WireEnvelope.model_validate(payload)
    failed = wire.is_failed is True or wire.is_success is False
    if failed:
        return Failure(message=wire.message or "")
    if wire.data is None:
        return Failure(message=wire.message or "Response contained no data")
    return Success[data_type](data=wire.data)  # type: ignore[valid-type]


def is_success(envelope: "Success[Any] | Failure") -> bool:
    """Cache predicate: only successful envelopes are worth remembering."""
    return isinstance(envelope, Success)
