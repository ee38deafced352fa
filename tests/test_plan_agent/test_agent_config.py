"""Tests for AgentConfig."""

from __future__ import annotations

import pytest

from plan_agent.config import AgentConfig

_ENV_VARS = (
    "PLAN_AGENT_PROVIDER",
    "PLAN_AGENT_MODEL",
    "PLAN_AGENT_STEP_DELAY_MS",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        config = AgentConfig()
        assert config.provider == "anthropic"
        assert config.step_delay_ms == 1000
        assert config.max_plan_chars == 200_000
        assert config.temperature is None

    def test_resolved_model_falls_back_to_provider_default(self) -> None:
        assert AgentConfig(provider="openai").resolved_model == "gpt-4o"
        assert AgentConfig(provider="openai", model="gpt-x").resolved_model == "gpt-x"
        assert AgentConfig(provider="stub").resolved_model == ""

    def test_resolved_base_url_strips_trailing_slash(self) -> None:
        assert AgentConfig(provider="anthropic").resolved_base_url == "https://api.anthropic.com"
        config = AgentConfig(provider="openai", base_url="http://localhost:8080/")
        assert config.resolved_base_url == "http://localhost:8080"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            AgentConfig().provider = "openai"  # type: ignore[misc]


class TestFromEnv:
    def test_no_env_defaults_to_anthropic(self) -> None:
        config = AgentConfig.from_env()
        assert config.provider == "anthropic"
        assert config.api_key == ""

    def test_first_key_found_picks_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        config = AgentConfig.from_env()
        assert config.provider == "openai"
        assert config.api_key == "sk-openai"

    def test_anthropic_key_preferred(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        assert AgentConfig.from_env().provider == "anthropic"

    def test_explicit_provider_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("PLAN_AGENT_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_BASE_URL", "http://proxy")
        config = AgentConfig.from_env()
        assert config.provider == "openai"
        assert config.api_key == "sk-openai"
        assert config.base_url == "http://proxy"

    def test_provider_override_selects_matching_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        config = AgentConfig.from_env(provider="openai")
        assert config.provider == "openai"
        assert config.api_key == "sk-openai"

    def test_model_and_delay(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLAN_AGENT_MODEL", "claude-test")
        monkeypatch.setenv("PLAN_AGENT_STEP_DELAY_MS", "250")
        config = AgentConfig.from_env()
        assert config.model == "claude-test"
        assert config.step_delay_ms == 250

    def test_none_overrides_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLAN_AGENT_MODEL", "from-env")
        config = AgentConfig.from_env(model=None, step_delay_ms=0)
        assert config.model == "from-env"
        assert config.step_delay_ms == 0
