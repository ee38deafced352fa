"""Transport construction from configuration."""
from __future__ import annotations

from plan_agent.config import AgentConfig
from plan_agent.errors import ConfigurationError
from plan_agent.llm.types import StreamTransport


def create_transport(config: AgentConfig) -> StreamTransport:
    """Build the streaming transport named by ``config.provider``.

    Provider modules are imported lazily so the stub needs no HTTP setup.
    """
    provider = config.provider
    if provider == "stub":
        from plan_agent.llm.stub import StubTransport

        return StubTransport()

    if not config.api_key:
        raise ConfigurationError(f"No API key configured for provider: {provider}")

    if provider == "anthropic":
        from plan_agent.llm.anthropic import AnthropicTransport

        return AnthropicTransport(
            api_key=config.api_key,
            base_url=config.resolved_base_url,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )

    if provider == "openai":
        from plan_agent.llm.openai import OpenAITransport

        return OpenAITransport(
            api_key=config.api_key,
            base_url=config.resolved_base_url,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )

    raise ConfigurationError(f"Unknown provider: {provider}")
