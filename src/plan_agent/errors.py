"""Error hierarchy for the plan agent."""
from __future__ import annotations

from typing import Any


class AgentError(Exception):
    """Base error for all plan_agent errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


# ---------------------------------------------------------------------------
# Orchestration errors
# ---------------------------------------------------------------------------


class InvocationError(AgentError):
    """The caller invoked the agent without a required argument."""


class SessionActiveError(AgentError):
    """A new task was started while another session is still active."""


class PlanningTransportError(AgentError):
    """The streaming planning call reported a failure."""


class ConfigurationError(AgentError):
    """Invalid agent configuration."""


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------


class ProviderError(AgentError):
    """Error returned by an LLM provider API."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
        raw: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.provider = provider
        self.status_code = status_code
        self.raw = raw


class AuthenticationError(ProviderError):
    """Authentication failed (e.g. invalid API key)."""


class RateLimitError(ProviderError):
    """Rate limit exceeded."""


class ServerError(ProviderError):
    """Server-side error from the provider."""


class RequestTimeoutError(AgentError):
    """A request timed out."""


class NetworkError(AgentError):
    """A network-level error occurred."""


class StreamError(AgentError):
    """An error occurred while processing a stream."""


def error_from_status_code(
    status_code: int,
    message: str,
    *,
    provider: str = "",
    raw: dict[str, Any] | None = None,
) -> ProviderError:
    """Map HTTP status code to the appropriate error type."""
    common: dict[str, Any] = dict(provider=provider, status_code=status_code, raw=raw)

    if status_code in (401, 403):
        return AuthenticationError(message, **common)
    if status_code == 429:
        return RateLimitError(message, **common)
    if 500 <= status_code <= 599:
        return ServerError(message, **common)
    return ProviderError(message, **common)
