"""REST adapter for the organisation accounts resource."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional
from uuid import UUID

from ledgerapi.adapters.api_errors import (
    ApiError,
    DeserializationError,
    ResourceOperationError,
    SerializationError,
    wrap_message,
)
from ledgerapi.domain.models import AccountData, Envelope
from ledgerapi.domain.ports import (
    AccountId,
    AccountsPort,
    Marshaller,
    TransportPort,
    Unmarshaller,
)

BASE_PATH = "/v1/organisation/accounts"


def marshal_json(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


class AccountsRestAdapter(AccountsPort):
    """HTTP adapter for ``/v1/organisation/accounts``.

    Endpoints:
      - POST   {base}/v1/organisation/accounts               body: {"data": {...}}
      - GET    {base}/v1/organisation/accounts/{id}
      - DELETE {base}/v1/organisation/accounts/{id}?version={n}

    Notes:
      - Transport failures are re-raised as ``ResourceOperationError`` with a
        ``"; unable to <op> resource"`` suffix; the original exception stays
        available as ``cause``.
      - Returned records are the server's representation, not the input.
    """

    def __init__(
        self,
        transport: TransportPort,
        *,
        marshaller: Optional[Marshaller] = None,
        unmarshaller: Optional[Unmarshaller] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.transport = transport
        self.marshaller: Marshaller = marshaller or marshal_json
        self.unmarshaller: Unmarshaller = unmarshaller or json.loads

    def create_resource(self, record: AccountData) -> AccountData:
        try:
            payload = self.marshaller(Envelope(data=record).to_dict())
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                wrap_message(exc, "unable to convert account data payload"),
                cause=exc,
            ) from exc

        try:
            raw = self.transport.post(BASE_PATH, payload)
        except (ApiError, ValueError) as exc:
            raise ResourceOperationError("create", exc) from exc

        created = self._decode(raw)
        self._log.info("Created account %s (version %s)", created.id, created.version)
        return created

    def fetch_resource(self, account_id: AccountId) -> AccountData:
        path = self._resource_path(account_id)
        try:
            raw = self.transport.get(path)
        except (ApiError, ValueError) as exc:
            raise ResourceOperationError("fetch", exc) from exc
        return self._decode(raw)

    def delete_resource(self, account_id: AccountId, version: int) -> None:
        path = self._resource_path(account_id)
        if isinstance(version, bool) or not isinstance(version, int) or version < 0:
            raise ValueError(f"invalid version: {version!r}")
        query = {"version": str(version)}
        try:
            self.transport.delete(path, query)
        except (ApiError, ValueError) as exc:
            raise ResourceOperationError("delete", exc) from exc
        self._log.info("Deleted account %s (version %s)", account_id, version)

    # ------------------------------------------------------------------
    @staticmethod
    def _resource_path(account_id: AccountId) -> str:
        """Build ``{BASE_PATH}/{id}`` after checking the id is a UUID."""
        try:
            if not isinstance(account_id, UUID):
                UUID(str(account_id))
        except ValueError as exc:
            raise ValueError(f"invalid uuid: {account_id}") from exc
        return f"{BASE_PATH}/{account_id}"

    def _decode(self, raw: bytes) -> AccountData:
        try:
            return Envelope.from_dict(self.unmarshaller(raw)).data
        except (TypeError, ValueError) as exc:
            raise DeserializationError(
                wrap_message(exc, "failed to unmarshal response data"),
                cause=exc,
            ) from exc


__all__ = ["AccountsRestAdapter", "BASE_PATH", "marshal_json"]
