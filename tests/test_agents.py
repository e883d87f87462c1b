"""
Tests for AgentSettings and the AgentFactory

NOTE: Building an agent never makes a request, so the real OpenAI-compatible model can be constructed with a dummy token
"""

import pytest
from pydantic_ai.models.openai import OpenAIChatModel
from customer_service.agents import AgentFactory
from customer_service.config import (
    AGENT_TEMPERATURE,
    CLASSIFIER_TEMPERATURE,
    DEFAULT_MODEL_ID,
    GENERAL_SYSTEM_PROMPT,
    GITHUB_MODELS_ENDPOINT,
    ORDER_SYSTEM_PROMPT,
    PRODUCT_SYSTEM_PROMPT,
    AgentSettings,
)
from customer_service.errors import ConfigurationError
from customer_service.tools import ALL_TOOLS, ORDER_TOOLS, PRODUCT_TOOLS


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "  github_pat_abc  ")
    monkeypatch.setenv("MODEL_ID", "gpt-4o")
    monkeypatch.delenv("GITHUB_MODELS_ENDPOINT", raising=False)

    settings = AgentSettings.from_env()

    assert settings.github_token == "github_pat_abc"
    assert settings.model_id == "gpt-4o"
    assert settings.endpoint == GITHUB_MODELS_ENDPOINT


def test_settings_from_env_defaults(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("MODEL_ID", raising=False)

    settings = AgentSettings.from_env()

    assert settings.model_id == DEFAULT_MODEL_ID
    assert settings.has_token is False


def test_settings_are_immutable():
    settings = AgentSettings(github_token="t")
    with pytest.raises(AttributeError):
        settings.github_token = "other"


@pytest.mark.parametrize("token", ["", "   "])
def test_require_credentials_rejects_missing_token(token):
    with pytest.raises(ConfigurationError):
        AgentSettings(github_token=token).require_credentials()


def test_factory_rejects_empty_model_id():
    with pytest.raises(ConfigurationError):
        AgentFactory(AgentSettings(github_token="t", model_id=" "))


def test_factory_without_token_fails_when_creating_agents():
    """The factory itself can be built (so the service boots), creating an agent cannot."""
    factory = AgentFactory(AgentSettings(github_token=""))
    with pytest.raises(ConfigurationError):
        factory.create_router_agent()


def test_factory_builds_github_models_client():
    factory = AgentFactory(AgentSettings(github_token="test-token", model_id="gpt-4o-mini"))

    agent = factory.create_specialist_agent("order", ORDER_SYSTEM_PROMPT, ORDER_TOOLS)

    assert isinstance(agent.model, OpenAIChatModel)
    assert agent.model.model_name == "gpt-4o-mini"


def test_router_agent_settings():
    agent = AgentFactory(AgentSettings(github_token="t")).create_router_agent()
    assert agent.name == "router"
    assert agent.model_settings["temperature"] == CLASSIFIER_TEMPERATURE


@pytest.mark.parametrize("name, prompt, tools", [
    ("order", ORDER_SYSTEM_PROMPT, ORDER_TOOLS),
    ("product", PRODUCT_SYSTEM_PROMPT, PRODUCT_TOOLS),
    ("general", GENERAL_SYSTEM_PROMPT, ALL_TOOLS),
])
def test_specialist_agent_settings(name, prompt, tools):
    agent = AgentFactory(AgentSettings(github_token="t")).create_specialist_agent(name, prompt, tools)
    assert agent.name == name
    assert agent.model_settings["temperature"] == AGENT_TEMPERATURE
