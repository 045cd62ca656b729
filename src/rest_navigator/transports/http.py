from __future__ import annotations

import logging
import time
from typing import Any, Optional, Union

import anyio
import httpx

from rest_navigator.core.errors import RequestCancelledError, TransportError
from rest_navigator.core.http import Cancellation, HeadersInput
from rest_navigator.core.observability import log_event


class HttpxTransport:
    """
    Transport backed by httpx.AsyncClient.
    - Merges `default_headers` into every request (explicit headers win)
    - Races the request against the caller's cancellation event
    - Wraps httpx failures in TransportError; no retries
    - Logs one `http_call` event per request
    """

    def __init__(
        self,
        *,
        http: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[logging.Logger] = None,
        request_id: Optional[str] = None,
    ):
        self.log = logger
        self.request_id = request_id
        self.default_headers = httpx.Headers()

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def send(
        self,
        uri: str,
        method: str,
        *,
        cancellation: Optional[Cancellation] = None,
        headers: Optional[HeadersInput] = None,
        content: Optional[Union[str, bytes]] = None,
    ) -> httpx.Response:
        method = method.upper()
        merged = httpx.Headers(headers)
        for key, value in self.default_headers.multi_items():
            if key not in merged:
                merged[key] = value

        start = time.perf_counter()
        status: Any = "exception"
        error_type: Optional[str] = None
        try:
            if cancellation is None:
                response = await self.http.request(
                    method, uri, headers=merged, content=content
                )
            else:
                response = await self._send_cancellable(
                    method, uri, cancellation, headers=merged, content=content
                )
            status = response.status_code
            return response
        except RequestCancelledError:
            status = "cancelled"
            raise
        except httpx.HTTPError as exc:
            error_type = type(exc).__name__
            raise TransportError(f"HTTPX error calling {method} {uri}: {exc}") from exc
        finally:
            log_event(
                "http_call",
                logger=self.log,
                request_id=self.request_id,
                method=method,
                uri=uri,
                status=status,
                duration_ms=int((time.perf_counter() - start) * 1000),
                error_type=error_type,
            )

    async def _send_cancellable(
        self,
        method: str,
        uri: str,
        cancellation: Cancellation,
        *,
        headers: httpx.Headers,
        content: Optional[Union[str, bytes]],
    ) -> httpx.Response:
        if cancellation.is_set():
            raise RequestCancelledError(f"{method} {uri} was cancelled before sending.")

        response: Optional[httpx.Response] = None
        error: Optional[Exception] = None

        async with anyio.create_task_group() as tg:

            async def watch() -> None:
                await cancellation.wait()
                tg.cancel_scope.cancel()

            tg.start_soon(watch)
            try:
                response = await self.http.request(
                    method, uri, headers=headers, content=content
                )
            except Exception as exc:
                # Re-raised outside the task group so it is not wrapped in an ExceptionGroup.
                error = exc
            tg.cancel_scope.cancel()

        if error is not None:
            raise error
        if response is None:
            raise RequestCancelledError(f"{method} {uri} was cancelled.")
        return response


__all__ = ["HttpxTransport"]
