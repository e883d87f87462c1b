"""
Shared fixtures for the customer service tests

NOTE: No test ever talks to GitHub Models. ALLOW_MODEL_REQUESTS = False makes pydantic-ai refuse any real model request,
      and every agent is built on a FunctionModel that plays back a script instead
NOTE: ScriptedModel tells the two kinds of calls apart by the tools the agent was given:
      the router agent has no tools, every specialist agent has at least three
NOTE: The call counters let a test assert "no remote call was made" for the empty-message cases
"""

import asyncio
import json
from collections.abc import AsyncIterator, Callable
import pytest
from pydantic_ai import models
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    ToolCallPart,
    ToolReturnPart,
)
from pydantic_ai.models.function import AgentInfo, DeltaToolCall, DeltaToolCalls, FunctionModel
from customer_service.agents import AgentFactory
from customer_service.config import AgentSettings
from customer_service.db import MockDB
from customer_service.orchestrator import InquiryOrchestrator

models.ALLOW_MODEL_REQUESTS = False


class ScriptedModel:
    """Fake remote model: answers the classifier with a fixed category and the specialist with a scripted reply"""

    def __init__(
        self,
        category: str = "general",
        reply: str | Callable[[list[ModelMessage]], str] = "Happy to help with that!",
        fragments: list[str] | None = None,
        tool_call: tuple[str, dict] | None = None,
        loop_tool_calls: bool = False,
        empty_response: bool = False,
        classify_error: Exception | None = None,
        reply_error: Exception | None = None,
        stream_error_after: int | None = None,
    ):
        self.category = category
        self.reply = reply
        self.fragments = fragments if fragments is not None else ["Happy ", "to help!"]
        self.tool_call = tool_call
        self.loop_tool_calls = loop_tool_calls
        self.empty_response = empty_response
        self.classify_error = classify_error
        self.reply_error = reply_error
        self.stream_error_after = stream_error_after

        self.classify_calls = 0
        self.reply_calls = 0
        self.classify_seen: list[tuple[list[ModelMessage], AgentInfo]] = []
        self.reply_seen: list[tuple[list[ModelMessage], AgentInfo]] = []

    @property
    def total_calls(self) -> int:
        return self.classify_calls + self.reply_calls

    def model(self) -> FunctionModel:
        return FunctionModel(self._respond, stream_function=self._stream)

    @staticmethod
    def _is_classification(info: AgentInfo) -> bool:
        return not info.function_tools

    @staticmethod
    def _tool_already_answered(messages: list[ModelMessage]) -> bool:
        last = messages[-1]
        return isinstance(last, ModelRequest) and any(isinstance(p, ToolReturnPart) for p in last.parts)

    def _respond(self, messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if self._is_classification(info):
            self.classify_calls += 1
            self.classify_seen.append((messages, info))
            if self.classify_error is not None:
                raise self.classify_error
            return ModelResponse(parts=[TextPart(self.category)])

        self.reply_calls += 1
        self.reply_seen.append((messages, info))
        if self.reply_error is not None:
            raise self.reply_error

        if self.loop_tool_calls:
            return ModelResponse(parts=[ToolCallPart("track_shipment", {"tracking_number": "TRK123456789"})])

        if self.tool_call is not None and not self._tool_already_answered(messages):
            name, args = self.tool_call
            return ModelResponse(parts=[ToolCallPart(name, args)])

        if self.empty_response:
            return ModelResponse(parts=[])

        text = self.reply(messages) if callable(self.reply) else self.reply
        return ModelResponse(parts=[TextPart(text)])

    async def _stream(self, messages: list[ModelMessage], info: AgentInfo) -> AsyncIterator[str | DeltaToolCalls]:
        self.reply_calls += 1
        self.reply_seen.append((messages, info))
        if self.tool_call is not None and not self._tool_already_answered(messages):
            name, args = self.tool_call
            yield {0: DeltaToolCall(name=name, json_args=json.dumps(args), tool_call_id="call-1")}
            return
        for i, fragment in enumerate(self.fragments):
            if self.stream_error_after is not None and i == self.stream_error_after:
                raise RuntimeError("upstream connection reset")
            yield fragment


def tool_returns_text(messages: list[ModelMessage]) -> str:
    """Echo every tool result the model received, the way a real model would summarize them"""
    returns = [
        part
        for message in messages
        if isinstance(message, ModelRequest)
        for part in message.parts
        if isinstance(part, ToolReturnPart)
    ]
    return " ".join(part.model_response_str() for part in returns)


def run(coro):
    return asyncio.run(coro)


async def collect(fragments: AsyncIterator[str]) -> list[str]:
    return [fragment async for fragment in fragments]


@pytest.fixture
def settings() -> AgentSettings:
    return AgentSettings(github_token="test-token")


@pytest.fixture
def db() -> MockDB:
    """Fresh MockDB for each test"""
    return MockDB()


@pytest.fixture
def make_orchestrator(settings: AgentSettings, db: MockDB) -> Callable[[ScriptedModel], InquiryOrchestrator]:
    """Build an orchestrator whose agents all run on the given scripted model"""
    def _make(fake: ScriptedModel) -> InquiryOrchestrator:
        return InquiryOrchestrator(AgentFactory(settings, model=fake.model()), db)
    return _make
