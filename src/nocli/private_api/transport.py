"""HTTP transport for the browser-facing private API.

Each call follows the same fixed lifecycle:

1. POST the JSON payload with browser-like headers and the session cookie.
2. On a network failure -- raise :class:`NocliNetworkError`.
3. On a status outside ``2xx`` -- raise the matching
   :class:`NocliStatusError` subclass carrying the status and body.
4. On ``2xx`` -- decode the body, raising :class:`NocliDecodeError` if it
   is not a JSON object.

There is no retry: the private API is used interactively and an expired
session will not recover by itself.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from nocli._version import __version__
from nocli.config import NocliConfig
from nocli.errors import (
    NocliAuthError,
    NocliDecodeError,
    NocliNetworkError,
    NocliNotFoundError,
    NocliPermissionError,
    NocliStatusError,
)
from nocli.observability import NoopMetricsHook, get_logger

log = get_logger("nocli.transport")

_BODY_PREVIEW_CHARS = 500

USER_AGENT = f"Mozilla/5.0 nocli/{__version__}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def build_headers(config: NocliConfig) -> dict[str, str]:
    """Return the fixed request headers for *config*."""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Origin": config.base_url,
        "Referer": config.base_url + "/",
        "User-Agent": USER_AGENT,
        "X-Requested-With": "XMLHttpRequest",
    }
    cookie = config.cookie_header
    if cookie:
        headers["Cookie"] = cookie
    if config.active_user_id:
        headers["x-notion-active-user-header"] = config.active_user_id
    return headers


def _raise_for_status(response: httpx.Response, endpoint: str) -> None:
    """Raise the :class:`NocliStatusError` subclass matching a non-2xx response."""
    status = response.status_code
    body = response.text.strip()[:_BODY_PREVIEW_CHARS]
    context = {"endpoint": endpoint, "status_code": status, "body": body}

    if status == 401:
        raise NocliAuthError(
            message=(
                f"request to {endpoint} failed: status={status} body={body} "
                "(session cookie missing or expired?)"
            ),
            context=context,
        )
    if status == 403:
        raise NocliPermissionError(
            message=(
                f"request to {endpoint} failed: status={status} body={body} "
                "(no access, or session cookie expired?)"
            ),
            context=context,
        )
    if status == 404:
        raise NocliNotFoundError(
            message=f"request to {endpoint} failed: status={status} body={body}",
            context=context,
        )
    raise NocliStatusError(
        message=f"request to {endpoint} failed: status={status} body={body}",
        context=context,
    )


def _decode_body(response: httpx.Response, endpoint: str) -> dict[str, Any]:
    context = {
        "endpoint": endpoint,
        "status_code": response.status_code,
        "body": response.text.strip()[:_BODY_PREVIEW_CHARS],
    }
    try:
        data = response.json()
    except ValueError as exc:
        raise NocliDecodeError(
            message=f"decode response json from {endpoint}: {exc}",
            context=context,
            cause=exc,
        ) from exc
    if not isinstance(data, dict):
        raise NocliDecodeError(
            message=(
                f"decode response json from {endpoint}: expected an object, "
                f"got {type(data).__name__}"
            ),
            context=context,
        )
    return data


def _dump_payload(
    config: NocliConfig,
    url: str,
    payload: Any,
    response: httpx.Response,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from nocli.utils.redact import redact

    try:
        resp_body: Any = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    dump: dict[str, Any] = {
        "method": "POST",
        "url": url,
        "request_headers": build_headers(config),
        "request_body": payload,
        "response_status": response.status_code,
        "response_body": resp_body,
    }
    safe_dump = redact(dump, (config.token_v2, config.cookie))
    print(_json.dumps(safe_dump, indent=2, default=str), file=sys.stderr)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class PrivateTransport:
    """Synchronous POST-JSON transport with cookie authentication.

    Parameters
    ----------
    config:
        A :class:`NocliConfig` instance controlling all transport behaviour.
    http_transport:
        Optional :class:`httpx.BaseTransport` handed to the underlying
        client, e.g. an ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: NocliConfig,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            base_url=config.base_url,
            headers=build_headers(config),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=http_transport,
        )

    def post_json(
        self,
        endpoint: str,
        payload: Any,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST *payload* as JSON to ``base_url + endpoint``.

        Parameters
        ----------
        endpoint:
            Path relative to ``base_url`` (e.g. ``/api/v3/loadPageChunk``).
        payload:
            JSON-serialisable request body.
        params:
            Optional query-string parameters.

        Returns
        -------
        dict
            The decoded JSON object.

        Raises
        ------
        NocliNetworkError
            On transport-level failures, including the timeout.
        NocliAuthError, NocliPermissionError, NocliNotFoundError
            On 401, 403 and 404 responses.
        NocliStatusError
            On any other status outside 200-299.
        NocliDecodeError
            When a 2xx body is not a JSON object.
        """
        t0 = time.monotonic()
        try:
            response = self._client.post(endpoint, json=payload, params=params)
        except httpx.TransportError as exc:
            self._metrics.increment(
                "nocli.requests_total",
                tags={"endpoint": endpoint, "status": "error"},
            )
            log.warning(
                "Request network error",
                extra={
                    "extra_fields": {
                        "op": "post_json",
                        "endpoint": endpoint,
                        "error": str(exc),
                    }
                },
            )
            raise NocliNetworkError(
                message=f"execute request to {endpoint}: {exc}",
                context={"endpoint": endpoint},
                cause=exc,
            ) from exc

        elapsed_ms = (time.monotonic() - t0) * 1000
        status = str(response.status_code)
        self._metrics.increment(
            "nocli.requests_total",
            tags={"endpoint": endpoint, "status": status},
        )
        self._metrics.timing(
            "nocli.request_duration_ms",
            elapsed_ms,
            tags={"endpoint": endpoint, "status": status},
        )
        log.debug(
            "Request complete",
            extra={
                "extra_fields": {
                    "op": "post_json",
                    "endpoint": endpoint,
                    "status": response.status_code,
                    "elapsed_ms": round(elapsed_ms, 1),
                }
            },
        )

        if self._config.debug_dump_payload:
            _dump_payload(self._config, str(response.request.url), payload, response)

        if not 200 <= response.status_code < 300:
            log.warning(
                "Request rejected",
                extra={
                    "extra_fields": {
                        "op": "post_json",
                        "endpoint": endpoint,
                        "status": response.status_code,
                    }
                },
            )
            _raise_for_status(response, endpoint)

        return _decode_body(response, endpoint)

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> PrivateTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
