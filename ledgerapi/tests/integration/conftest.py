"""In-process fake of the organisation accounts API for end-to-end tests."""

from __future__ import annotations

import copy
import io
import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest
from fastapi import FastAPI, Query, Response
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient
from pydantic import BaseModel

from ledgerapi.adapters.accounts_rest import AccountsRestAdapter
from ledgerapi.adapters.http_client import TransportClient
from ledgerapi.domain.models import AccountData, Envelope
from ledgerapi.domain.ports import HttpRequest, HttpResponse

TESTDATA = Path(__file__).resolve().parent / "testdata"


class EnvelopeIn(BaseModel):
    data: Dict[str, Any]


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error_message": message})


def _is_uuid(value: Any) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def build_fake_ledger_app() -> FastAPI:
    app = FastAPI(title="Fake ledger accounts API")
    accounts: Dict[str, Dict[str, Any]] = {}
    lock = threading.Lock()

    @app.post("/v1/organisation/accounts", status_code=201)
    def create_account(payload: EnvelopeIn):
        data = dict(payload.data)
        account_id = str(data.get("id") or "")
        if not _is_uuid(account_id) or not _is_uuid(data.get("organisation_id")):
            return _error(400, "validation failure")
        with lock:
            if account_id in accounts:
                return _error(
                    409, "Account cannot be created as it violates a duplicate constraint"
                )
            now = datetime.now(timezone.utc).isoformat()
            data.update(version=0, created_on=now, modified_on=now)
            accounts[account_id] = data
        return JSONResponse(status_code=201, content={"data": copy.deepcopy(data)})

    @app.get("/v1/organisation/accounts/{account_id}")
    def fetch_account(account_id: str):
        if not _is_uuid(account_id):
            return _error(400, "id is not a valid uuid")
        with lock:
            data = accounts.get(account_id)
        if data is None:
            return _error(404, f"record {account_id} does not exist")
        return {"data": copy.deepcopy(data)}

    @app.delete("/v1/organisation/accounts/{account_id}")
    def delete_account(account_id: str, version: int = Query(...)):
        with lock:
            data = accounts.get(account_id)
            if data is None:
                # The real API answers unknown ids with an empty 404.
                return Response(status_code=404)
            if data["version"] != version:
                return _error(409, "invalid version")
            del accounts[account_id]
        return Response(status_code=204)

    return app


class _AppExecutor:
    """``HttpExecutor`` that dispatches into a FastAPI app via ``TestClient``."""

    def __init__(self, client: TestClient) -> None:
        self.client = client

    def execute(self, request: HttpRequest) -> HttpResponse:
        resp = self.client.request(
            request.method,
            request.url,
            content=request.body,
            headers=request.headers,
        )
        return HttpResponse(status_code=resp.status_code, body=io.BytesIO(resp.content))


@pytest.fixture
def ledger_api():
    with TestClient(build_fake_ledger_app(), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def accounts_client(ledger_api) -> AccountsRestAdapter:
    transport = TransportClient(_AppExecutor(ledger_api), "http://testserver/ignored/path")
    return AccountsRestAdapter(transport)


@pytest.fixture
def account_data() -> Callable[[Optional[str]], AccountData]:
    raw = json.loads((TESTDATA / "account_create_data.json").read_text(encoding="utf-8"))

    def _build(account_id: Optional[str] = None) -> AccountData:
        payload = copy.deepcopy(raw)
        payload["data"]["id"] = account_id or str(uuid.uuid4())
        return Envelope.from_dict(payload).data

    return _build
