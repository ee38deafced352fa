"""HTTP streaming wrapper around httpx."""
from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx

from plan_agent.errors import NetworkError, RequestTimeoutError, error_from_status_code


class HttpStreamClient:
    """Thin wrapper around :mod:`httpx` that maps errors into plan_agent exceptions."""

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        *,
        provider: str = "",
        connect_timeout: float = 5.0,
        read_timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._provider = provider
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(
                connect=connect_timeout,
                read=read_timeout,
                write=read_timeout,
                pool=connect_timeout,
            ),
            transport=transport,
        )

    def post_stream(self, path: str, json: dict[str, Any]) -> Iterator[str]:
        """Send a streaming POST request and yield raw text lines.

        Raises a plan_agent error on non-2xx status or transport failure.
        """
        try:
            with self._client.stream("POST", path, json=json) as resp:
                if resp.status_code >= 300:
                    raw_text = resp.read().decode("utf-8", errors="replace")
                    try:
                        body = resp.json()
                    except ValueError:
                        body = {}
                    error = body.get("error") if isinstance(body, dict) else None
                    msg = error.get("message", raw_text) if isinstance(error, dict) else raw_text
                    raise error_from_status_code(
                        resp.status_code, msg, provider=self._provider, raw=body or None,
                    )

                yield from resp.iter_lines()
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Stream timed out: {exc}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error during stream: {exc}", cause=exc) from exc

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()
