"""HTTP transport for the ledger API adapters.

This module provides the verb-level ``TransportClient`` used by resource
adapters, plus a ``requests``-backed executor that performs the actual
network exchange.

Dependencies:
    - ``requests`` for network I/O in ``RequestsExecutor``.
    - ``ledgerapi.adapters.api_errors`` for typed transport and status failures.

Call context:
    - Constructed by ``ledgerapi.factory.build_accounts_client`` or directly by
      callers that inject their own ``HttpExecutor``.
    - Used by ``ledgerapi.adapters.accounts_rest.AccountsRestAdapter``; callers
      never see raw responses.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, AbstractSet, BinaryIO, Mapping, Optional
from urllib.parse import quote, urlencode, urljoin, urlsplit

import requests

from ledgerapi.adapters.api_errors import (
    ApiFailure,
    BodyReadError,
    InvalidConfiguration,
    TransportError,
    UnexpectedStatus,
    wrap_message,
)
from ledgerapi.domain.models import FailureRecord
from ledgerapi.domain.ports import (
    BodyReader,
    HttpExecutor,
    HttpRequest,
    HttpResponse,
    Unmarshaller,
)

_DEFAULT_BASE_URI = "http://localhost:8080"
_DEFAULT_TIMEOUT_S = 15.0
_BASE_URI_ENV_VARS = ("LEDGERAPI_BASE_URI", "API_BASE_URI")
_TIMEOUT_ENV_VAR = "LEDGERAPI_TIMEOUT_S"

# Every verb accepts the whole 2xx range; kept per verb so they cannot drift.
_POST_SUCCESS: AbstractSet[int] = frozenset(range(200, 300))
_GET_SUCCESS: AbstractSet[int] = frozenset(range(200, 300))
_DELETE_SUCCESS: AbstractSet[int] = frozenset(range(200, 300))


@dataclass
class HttpConfig:
    """Connection settings for the ledger API.

    Attributes:
        base_uri: Absolute URI of the API; only scheme and host are used.
        request_timeout_s: Timeout in seconds applied by ``RequestsExecutor``.
        user_agent: Optional ``User-Agent`` header value.
    """

    base_uri: str = _DEFAULT_BASE_URI
    request_timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HttpConfig":
        """Build a config from ``LEDGERAPI_*`` environment variables.

        ``API_BASE_URI`` is honoured as a fallback for the base URI. A
        non-numeric or non-positive timeout falls back to the default.
        """
        env = os.environ if environ is None else environ
        base_uri = _DEFAULT_BASE_URI
        for var in _BASE_URI_ENV_VARS:
            value = (env.get(var) or "").strip()
            if value:
                base_uri = value
                break
        return cls(
            base_uri=base_uri,
            request_timeout_s=_coerce_timeout(env.get(_TIMEOUT_ENV_VAR)),
            user_agent=(env.get("LEDGERAPI_USER_AGENT") or "").strip() or None,
        )


def _coerce_timeout(value: Optional[str]) -> float:
    if not value:
        return _DEFAULT_TIMEOUT_S
    try:
        timeout = float(value.strip())
    except ValueError:
        return _DEFAULT_TIMEOUT_S
    return timeout if timeout > 0 else _DEFAULT_TIMEOUT_S


class _ResponseStream:
    """Defers reading ``requests`` content so body failures surface on read."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    def read(self, size: int = -1) -> bytes:
        return self._response.content

    def close(self) -> None:
        self._response.close()


class RequestsExecutor(HttpExecutor):
    """``HttpExecutor`` on a shared ``requests.Session``.

    Performs one request per call with the configured timeout. Redirects are
    not followed, so a 3xx reaches the transport classifier. There is no retry
    loop: a failed call raises straight back to the transport.
    """

    def __init__(self, cfg: HttpConfig, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()

    def execute(self, request: HttpRequest) -> HttpResponse:
        headers = {"Accept": "application/json"}
        if self.cfg.user_agent:
            headers["User-Agent"] = self.cfg.user_agent
        headers.update(request.headers)
        resp = self.session.request(
            request.method,
            request.url,
            data=request.body,
            headers=headers,
            timeout=self.cfg.request_timeout_s,
            stream=True,
            allow_redirects=False,
        )
        return HttpResponse(status_code=resp.status_code, body=_ResponseStream(resp))  # type: ignore[arg-type]


def read_all(stream: BinaryIO) -> bytes:
    return stream.read()


class TransportClient:
    """Issues requests against a fixed origin and classifies the outcome.

    Successful calls return the raw response body. Everything else raises:
    ``TransportError`` when no response arrived, ``BodyReadError`` when the
    body could not be read, ``ApiFailure`` for 4xx and ``UnexpectedStatus``
    for any other non-success status. A 4xx body that cannot be unmarshalled
    raises the unmarshaller's own exception.
    """

    def __init__(
        self,
        executor: HttpExecutor,
        base_uri: str,
        *,
        body_reader: Optional[BodyReader] = None,
        unmarshaller: Optional[Unmarshaller] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.executor = executor
        self.origin = self._parse_origin(base_uri)
        self.body_reader: BodyReader = body_reader or read_all
        self.unmarshaller: Unmarshaller = unmarshaller or json.loads

    def post(self, path: str, body: bytes) -> bytes:
        request = HttpRequest(
            method="POST",
            url=self._make_url(path),
            body=body,
            headers={"Content-Type": "application/json"},
        )
        try:
            response = self._execute(request)
        except Exception as exc:
            raise TransportError(
                wrap_message(exc, "failed to post data"),
                context=f"POST {request.url}",
                cause=exc,
            ) from exc
        return self._handle_response(response, ctx=f"POST {request.url}", success=_POST_SUCCESS)

    def get(self, path: str) -> bytes:
        request = HttpRequest(method="GET", url=self._make_url(path))
        try:
            response = self._execute(request)
        except Exception as exc:
            # No suffix here, unlike post; message consumers depend on the raw text.
            raise TransportError(str(exc), context=f"GET {request.url}", cause=exc) from exc
        return self._handle_response(response, ctx=f"GET {request.url}", success=_GET_SUCCESS)

    def delete(self, path: str, query: Mapping[str, str]) -> None:
        request = HttpRequest(method="DELETE", url=self._make_url(path, query))
        try:
            response = self._execute(request)
        except Exception as exc:
            raise TransportError(str(exc), context=f"DELETE {request.url}", cause=exc) from exc
        self._handle_response(
            response,
            ctx=f"DELETE {request.url}",
            success=_DELETE_SUCCESS,
            synthesize_not_found=True,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _parse_origin(base_uri: Any) -> str:
        if not isinstance(base_uri, str):
            raise InvalidConfiguration(
                f"expected string, got {type(base_uri).__name__}; invalid base uri"
            )
        try:
            parts = urlsplit(base_uri.strip())
            _port = parts.port  # raises on a malformed port
        except ValueError as exc:
            raise InvalidConfiguration(wrap_message(exc, "invalid base uri"), cause=exc) from exc
        host = parts.netloc.rpartition("@")[2]
        if not parts.scheme or not host:
            raise InvalidConfiguration(
                f"parse {base_uri!r}: missing scheme or host; invalid base uri"
            )
        return f"{parts.scheme}://{host}"

    def _make_url(self, path: str, query: Optional[Mapping[str, str]] = None) -> str:
        url = urljoin(self.origin, quote(path, safe="/:@-._~!$&'()*+,;="))
        if query:
            url = f"{url}?{urlencode(sorted((str(k), str(v)) for k, v in query.items()))}"
        return url

    def _execute(self, request: HttpRequest) -> HttpResponse:
        self._log.debug("%s %s", request.method, request.url)
        return self.executor.execute(request)

    def _handle_response(
        self,
        response: HttpResponse,
        *,
        ctx: str,
        success: AbstractSet[int],
        synthesize_not_found: bool = False,
    ) -> bytes:
        status = response.status_code
        try:
            body = self.body_reader(response.body)
        except Exception as exc:
            raise BodyReadError(
                wrap_message(exc, "failed to read response body"),
                status=status,
                context=ctx,
                cause=exc,
            ) from exc
        finally:
            close = getattr(response.body, "close", None)
            if callable(close):
                close()

        self._log.debug("%s -> %s (%d bytes)", ctx, status, len(body))
        if status in success:
            return body
        # 404 bodies are not guaranteed on delete.
        if synthesize_not_found and status == 404 and not body.strip():
            raise ApiFailure(FailureRecord(error_message="not found", status_code=404), context=ctx)
        if 400 <= status < 500:
            record = FailureRecord.from_dict(self.unmarshaller(body))
            raise ApiFailure(record.with_status(status), context=ctx)
        raise UnexpectedStatus(status, payload=body, context=ctx)


__all__ = ["HttpConfig", "RequestsExecutor", "TransportClient", "read_all"]
