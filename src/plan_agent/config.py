"""Agent configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}

DEFAULT_BASE_URLS = {
    "anthropic": "https://api.anthropic.com",
    "openai": "https://api.openai.com",
}


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for a plan agent run."""

    provider: str = "anthropic"  # "anthropic", "openai" or "stub"
    model: str = ""  # empty = provider default
    base_url: str = ""  # empty = provider default
    api_key: str = ""
    step_delay_ms: int = 1000
    max_plan_chars: int = 200_000
    max_tokens: int = 4096
    temperature: float | None = None
    connect_timeout: float = 5.0
    read_timeout: float = 120.0

    @classmethod
    def from_env(cls, **overrides: object) -> AgentConfig:
        """Build a config from environment variables.

        A ``provider`` override or PLAN_AGENT_PROVIDER wins; otherwise the
        first provider whose API key is present (ANTHROPIC_API_KEY, then
        OPENAI_API_KEY) is used.
        Keyword overrides are applied last; ``None`` values are ignored.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        provider = str(changes.get("provider") or os.environ.get("PLAN_AGENT_PROVIDER", ""))
        if not provider:
            if os.environ.get("ANTHROPIC_API_KEY"):
                provider = "anthropic"
            elif os.environ.get("OPENAI_API_KEY"):
                provider = "openai"
            else:
                provider = "anthropic"

        prefix = provider.upper()
        config = cls(
            provider=provider,
            model=os.environ.get("PLAN_AGENT_MODEL", ""),
            base_url=os.environ.get(f"{prefix}_BASE_URL", ""),
            api_key=os.environ.get(f"{prefix}_API_KEY", ""),
            step_delay_ms=int(os.environ.get("PLAN_AGENT_STEP_DELAY_MS", "1000")),
        )
        return replace(config, **changes) if changes else config

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS.get(self.provider, "")

    @property
    def resolved_base_url(self) -> str:
        return (self.base_url or DEFAULT_BASE_URLS.get(self.provider, "")).rstrip("/")
