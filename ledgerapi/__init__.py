"""Client library for the organisation accounts resource of the ledger API."""

from .adapters.accounts_rest import AccountsRestAdapter
from .adapters.api_errors import (
    ApiError,
    ApiFailure,
    BodyReadError,
    DeserializationError,
    InvalidConfiguration,
    ResourceOperationError,
    SerializationError,
    TransportError,
    UnexpectedStatus,
    find_error,
)
from .adapters.http_client import HttpConfig, RequestsExecutor, TransportClient
from .domain.models import AccountAttributes, AccountData, Envelope, FailureRecord
from .factory import build_accounts_client

__all__ = [
    "AccountAttributes",
    "AccountData",
    "AccountsRestAdapter",
    "ApiError",
    "ApiFailure",
    "BodyReadError",
    "DeserializationError",
    "Envelope",
    "FailureRecord",
    "HttpConfig",
    "InvalidConfiguration",
    "RequestsExecutor",
    "ResourceOperationError",
    "SerializationError",
    "TransportClient",
    "TransportError",
    "UnexpectedStatus",
    "build_accounts_client",
    "find_error",
]
