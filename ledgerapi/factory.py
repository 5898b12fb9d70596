"""Composition helpers for the accounts client."""

from __future__ import annotations

from typing import Optional

import requests

from ledgerapi.adapters.accounts_rest import AccountsRestAdapter
from ledgerapi.adapters.http_client import HttpConfig, RequestsExecutor, TransportClient


def build_accounts_client(
    cfg: Optional[HttpConfig] = None,
    *,
    session: Optional[requests.Session] = None,
) -> AccountsRestAdapter:
    """Wire ``RequestsExecutor`` -> ``TransportClient`` -> ``AccountsRestAdapter``.

    Args:
        cfg: Connection settings; read from the environment when omitted.
        session: Optional pre-built ``requests.Session`` to share.

    Raises:
        InvalidConfiguration: If ``cfg.base_uri`` has no scheme or host.
    """
    cfg = cfg or HttpConfig.from_env()
    transport = TransportClient(RequestsExecutor(cfg, session=session), cfg.base_uri)
    return AccountsRestAdapter(transport)


__all__ = ["build_accounts_client"]
