"""
NOTE: One agent per logical role: router, order, product, general. They all point at the same remote model
NOTE: The specialist prompt and tool set are chosen by the orchestrator route, the factory only assembles the agent
NOTE: The factory owns the credentials. Nothing else reads GITHUB_TOKEN
NOTE: A missing token is only raised when an agent is created, so the service can still boot (degraded) and serve /health
NOTE: Tests pass an explicit pydantic-ai Model (FunctionModel) so no network call is ever made
NOTE: The temperature lives in each agent's model_settings:
    router      -> CLASSIFIER_TEMPERATURE, no tools, no system prompt (the instruction is embedded in the user turn)
    specialists -> AGENT_TEMPERATURE, a system prompt and a tool set
"""

from collections.abc import Sequence
from customer_service.config import (
    AGENT_TEMPERATURE,
    CLASSIFIER_TEMPERATURE,
    AgentSettings,
    AppContext,
)
from customer_service.errors import ConfigurationError
from pydantic_ai import Agent, Tool
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings


class AgentFactory:
    """Creates the customer service agents bound to one remote model"""

    def __init__(self, settings: AgentSettings, model: Model | None = None):
        if not settings.model_id or not settings.model_id.strip():
            raise ConfigurationError("Model ID cannot be empty")
        self._settings = settings
        self._model = model

    @property
    def settings(self) -> AgentSettings:
        return self._settings

    def _build_model(self) -> Model:
        if self._model is not None:
            return self._model

        self._settings.require_credentials()
        # GitHub Models speaks the OpenAI chat completions protocol
        return OpenAIChatModel(
            model_name=self._settings.model_id,
            provider=OpenAIProvider(
                base_url=self._settings.endpoint,
                api_key=self._settings.github_token,
            ),
        )

    def create_router_agent(self) -> Agent[None, str]:
        """Creates a router agent that classifies customer inquiries"""
        return Agent(
            model=self._build_model(),
            output_type=str,
            name="router",
            model_settings=ModelSettings(temperature=CLASSIFIER_TEMPERATURE),
        )

    def create_specialist_agent(
        self, name: str, system_prompt: str, tools: Sequence[Tool[AppContext]]
    ) -> Agent[AppContext, str]:
        """Creates a specialist agent answering with the given system prompt and tools"""
        return Agent(
            model=self._build_model(),
            output_type=str,
            deps_type=AppContext,
            name=name,
            system_prompt=system_prompt,
            tools=list(tools),
            model_settings=ModelSettings(temperature=AGENT_TEMPERATURE),
        )

