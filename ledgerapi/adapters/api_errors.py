"""Typed failures raised by the ledger API adapters.

The message of every error is part of the public contract: integration
consumers match on the text, so formats here must stay stable.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from ledgerapi.domain.models import FailureRecord

E = TypeVar("E", bound=BaseException)


class ApiError(RuntimeError):
    """Base class for ledger API adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
        context: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.context = context
        self.cause = cause


class InvalidConfiguration(ApiError):
    """Base URI cannot be turned into an absolute origin."""


class TransportError(ApiError):
    """The executor failed before any response was received."""


class BodyReadError(ApiError):
    """The response arrived but its body could not be read."""


class UnexpectedStatus(ApiError):
    """Status code outside the success and client-error ranges."""

    def __init__(self, status: int, *, payload: Any = None, context: Optional[str] = None) -> None:
        super().__init__(
            f"unexpected status code {status}",
            status=status,
            payload=payload,
            context=context,
        )


class ApiFailure(ApiError):
    """HTTP 4xx from the ledger API, carrying the parsed failure record."""

    def __init__(self, record: FailureRecord, *, context: Optional[str] = None) -> None:
        super().__init__(
            format_failure(record),
            status=record.status_code,
            payload=record,
            context=context,
        )
        self.record = record

    @property
    def status_code(self) -> int:
        return self.record.status_code

    @property
    def error_message(self) -> str:
        return self.record.error_message


class SerializationError(ApiError):
    """Request envelope could not be marshalled."""


class DeserializationError(ApiError):
    """Response envelope could not be unmarshalled."""


class ResourceOperationError(ApiError):
    """A resource call failed; the original failure stays reachable via ``cause``."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(
            wrap_message(cause, f"unable to {operation} resource"),
            status=getattr(cause, "status", None),
            context=operation,
            cause=cause,
        )
        self.operation = operation

    @property
    def status_code(self) -> Optional[int]:
        failure = find_error(self, ApiFailure)
        return failure.status_code if failure is not None else None


def format_failure(record: FailureRecord) -> str:
    if not record.error_message:
        return f"api failure with status code {record.status_code} and no message received"
    return (
        f"api failure with status code {record.status_code} "
        f"and message: {record.error_message}"
    )


def wrap_message(cause: BaseException, suffix: str) -> str:
    return f"{cause}; {suffix}"


def find_error(exc: Optional[BaseException], kind: Type[E]) -> Optional[E]:
    """Return the first exception of ``kind`` in the wrap chain of ``exc``.

    Follows ``cause`` attributes set by the adapters and the ``__cause__``
    links set by ``raise ... from``.
    """
    seen = set()
    current = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, kind):
            return current
        seen.add(id(current))
        current = getattr(current, "cause", None) or current.__cause__
    return None


__all__ = [
    "ApiError",
    "ApiFailure",
    "BodyReadError",
    "DeserializationError",
    "InvalidConfiguration",
    "ResourceOperationError",
    "SerializationError",
    "TransportError",
    "UnexpectedStatus",
    "find_error",
    "format_failure",
    "wrap_message",
]
