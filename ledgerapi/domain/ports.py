from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Mapping, Optional, Protocol, Union
from uuid import UUID

from ledgerapi.domain.models import AccountData

AccountId = Union[str, UUID]


# ---- Transport descriptors ----
@dataclass(frozen=True)
class HttpRequest:
    """One outgoing request: method, absolute URL and optional payload."""

    method: str
    url: str
    body: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HttpResponse:
    """Status code plus a readable body stream."""

    status_code: int
    body: BinaryIO


# ---- Ports (Hexagonal boundaries) ----
class HttpExecutor(Protocol):
    """Performs exactly one HTTP exchange. Raises on network failure."""

    def execute(self, request: HttpRequest) -> HttpResponse: ...


class BodyReader(Protocol):
    def __call__(self, stream: BinaryIO) -> bytes: ...


class Marshaller(Protocol):
    def __call__(self, value: Any) -> bytes: ...


class Unmarshaller(Protocol):
    def __call__(self, raw: bytes) -> Any: ...


class TransportPort(Protocol):
    """Verb-level access to the ledger API relative to a fixed origin."""

    def post(self, path: str, body: bytes) -> bytes: ...
    def get(self, path: str) -> bytes: ...
    def delete(self, path: str, query: Mapping[str, str]) -> None: ...


class AccountsPort(Protocol):
    """Create/fetch/delete for the organisation accounts resource."""

    def create_resource(self, record: AccountData) -> AccountData: ...
    def fetch_resource(self, account_id: AccountId) -> AccountData: ...
    def delete_resource(self, account_id: AccountId, version: int) -> None: ...
