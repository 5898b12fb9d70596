"""Domain package exports for account records and port definitions."""

from .models import AccountAttributes, AccountData, Envelope, FailureRecord
from .ports import (
    AccountId,
    AccountsPort,
    BodyReader,
    HttpExecutor,
    HttpRequest,
    HttpResponse,
    Marshaller,
    TransportPort,
    Unmarshaller,
)

__all__ = [
    "AccountAttributes",
    "AccountData",
    "AccountId",
    "AccountsPort",
    "BodyReader",
    "Envelope",
    "FailureRecord",
    "HttpExecutor",
    "HttpRequest",
    "HttpResponse",
    "Marshaller",
    "TransportPort",
    "Unmarshaller",
]
