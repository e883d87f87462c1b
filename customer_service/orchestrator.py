"""
Inquiry orchestration: classify the message, pick the specialist, produce the reply
NOTE: The two model calls for one inquiry are always awaited in sequence. Classification finishes (or falls back) before the response call starts
NOTE: The orchestrator holds no per-request state, so one instance is shared by every concurrent request
NOTE: Error policy:
    empty message        -> EmptyMessageError (single-shot) or one error fragment (streaming), before any model call
    classification error -> silently treated as GENERAL
    response error       -> InquiryProcessingError, cause logged and chained
    empty model output   -> FALLBACK_REPLY (blank text, or a reply pydantic-ai rejects as empty)
    streaming error      -> propagates; the HTTP layer ends the stream
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass
from typing import assert_never
from customer_service.agents import AgentFactory
from customer_service.config import (
    CLASSIFICATION_PROMPT_TEMPLATE,
    EMPTY_MESSAGE_STREAM_ERROR,
    FALLBACK_REPLY,
    GENERAL_SYSTEM_PROMPT,
    MAX_TOOL_ROUNDS,
    ORDER_SYSTEM_PROMPT,
    PRODUCT_SYSTEM_PROMPT,
    AppContext,
)
from customer_service.db import CommerceBackend
from customer_service.errors import ConfigurationError, EmptyMessageError, InquiryProcessingError
from customer_service.logger import get_logger
from customer_service.schemas import InquiryCategory
from customer_service.tools import ALL_TOOLS, ORDER_TOOLS, PRODUCT_TOOLS
from pydantic_ai import Agent, Tool, UsageLimits
from pydantic_ai.exceptions import UnexpectedModelBehavior

logger = get_logger(__name__)

_STREAM_END = object()


@dataclass(frozen=True)
class AgentRoute:
    """The agent, tool set and system prompt chosen for one inquiry"""
    category: InquiryCategory
    agent: Agent[AppContext, str]
    tools: tuple[Tool[AppContext], ...]
    system_prompt: str


def is_blank(message: str | None) -> bool:
    return not message or not message.strip()


def parse_category(text: str | None) -> InquiryCategory:
    """Normalize the classifier reply. Anything but an exact category word becomes GENERAL"""
    if not text:
        return InquiryCategory.GENERAL
    try:
        return InquiryCategory(text.strip().lower())
    except ValueError:
        return InquiryCategory.GENERAL


def _who(customer_id: str | None) -> str:
    return customer_id or "anonymous"


class InquiryOrchestrator:
    """Routes customer inquiries to the matching specialist agent"""

    def __init__(self, factory: AgentFactory, db: CommerceBackend):
        self._factory = factory
        self._db = db

    def _response_limits(self) -> UsageLimits:
        # each tool round is one model request, plus the request that produces the final answer
        return UsageLimits(request_limit=MAX_TOOL_ROUNDS + 1)

    async def classify(self, message: str, customer_id: str | None = None) -> InquiryCategory:
        """Ask the router agent for a category. Never raises: failures resolve to GENERAL"""
        prompt = CLASSIFICATION_PROMPT_TEMPLATE.format(message=message)
        try:
            router = self._factory.create_router_agent()
            result = await router.run(user_prompt=prompt, usage_limits=UsageLimits(request_limit=1))
        except Exception as e:
            logger.warning(f"Classification failed, using general | customer={_who(customer_id)} | error={e!r}")
            return InquiryCategory.GENERAL

        category = parse_category(result.output)
        if category.value != (result.output or "").strip().lower():
            logger.warning(f"Unrecognized category, using general | customer={_who(customer_id)} | raw={result.output!r}")
        return category

    def _route(self, category: InquiryCategory, tools: tuple[Tool[AppContext], ...], system_prompt: str) -> AgentRoute:
        # the agent is built from the same tools and prompt the route reports, so the two cannot drift apart
        agent = self._factory.create_specialist_agent(category.value, system_prompt, tools)
        return AgentRoute(category, agent, tools, system_prompt)

    def select(self, category: InquiryCategory) -> AgentRoute:
        match category:
            case InquiryCategory.ORDER:
                return self._route(category, ORDER_TOOLS, ORDER_SYSTEM_PROMPT)
            case InquiryCategory.PRODUCT:
                return self._route(category, PRODUCT_TOOLS, PRODUCT_SYSTEM_PROMPT)
            case InquiryCategory.GENERAL:
                return self._route(category, ALL_TOOLS, GENERAL_SYSTEM_PROMPT)
            case _:
                assert_never(category)

    async def respond(self, message: str, route: AgentRoute, customer_id: str | None = None) -> str:
        ctx = AppContext(db=self._db, customer_id=customer_id)
        try:
            result = await route.agent.run(
                user_prompt=message,
                deps=ctx,
                usage_limits=self._response_limits(),
            )
        except UnexpectedModelBehavior as e:
            # pydantic-ai retries an empty reply (no text, no tool call) and gives up with this error
            logger.warning(f"Model returned no usable reply, sending fallback | customer={_who(customer_id)} | error={e}")
            return FALLBACK_REPLY
        except Exception as e:
            logger.exception(f"Response generation failed | customer={_who(customer_id)} | category={route.category.value}")
            raise InquiryProcessingError() from e

        usage = result.usage()
        logger.info(
            f"Inquiry answered | customer={_who(customer_id)} | category={route.category.value} | "
            f"input_tokens={usage.input_tokens} | output_tokens={usage.output_tokens} | requests={usage.requests}"
        )

        reply = result.output
        if not reply or not reply.strip():
            logger.warning(f"Model returned no text, sending fallback | customer={_who(customer_id)}")
            return FALLBACK_REPLY
        return reply

    async def respond_stream(
        self, message: str, route: AgentRoute, customer_id: str | None = None
    ) -> AsyncIterator[str]:
        """
            Yields non-empty text fragments in the order the model produced them
            NOTE: The model stream runs in its own task and hands fragments over through a one-slot queue, so the model
                  is never more than one fragment ahead of the consumer
            NOTE: Closing this generator cancels that task. The cancellation unwinds run_stream and releases the remote call
        """
        ctx = AppContext(db=self._db, customer_id=customer_id)
        queue: asyncio.Queue[str | Exception | object] = asyncio.Queue(maxsize=1)

        async def produce():
            fragments = 0
            try:
                async with route.agent.run_stream(
                    user_prompt=message,
                    deps=ctx,
                    usage_limits=self._response_limits(),
                ) as result:
                    # debounce_by=None: forward every delta as it arrives instead of batching them
                    async for text in result.stream_text(delta=True, debounce_by=None):
                        if not text:
                            continue
                        fragments += 1
                        await queue.put(text)

                    usage = result.usage()
                    logger.info(
                        f"Inquiry streamed | customer={_who(customer_id)} | category={route.category.value} | "
                        f"fragments={fragments} | input_tokens={usage.input_tokens} | "
                        f"output_tokens={usage.output_tokens} | requests={usage.requests}"
                    )
            except Exception as e:
                await queue.put(e)
                return
            await queue.put(_STREAM_END)

        producer = asyncio.create_task(produce())
        try:
            while True:
                item = await queue.get()
                if item is _STREAM_END:
                    return
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            if not producer.done():
                producer.cancel()
                await asyncio.wait({producer})

    async def process(self, message: str, customer_id: str | None = None) -> str:
        if is_blank(message):
            raise EmptyMessageError()

        logger.info(f"Processing inquiry | customer={_who(customer_id)}")
        category = await self.classify(message, customer_id)
        logger.info(f"Inquiry classified | customer={_who(customer_id)} | category={category.value}")

        try:
            route = self.select(category)
        except ConfigurationError as e:
            logger.error(f"Agent unavailable | customer={_who(customer_id)} | error={e}")
            raise InquiryProcessingError() from e

        return await self.respond(message, route, customer_id)

    async def process_stream(self, message: str, customer_id: str | None = None) -> AsyncIterator[str]:
        if is_blank(message):
            yield EMPTY_MESSAGE_STREAM_ERROR
            return

        logger.info(f"Processing streaming inquiry | customer={_who(customer_id)}")
        category = await self.classify(message, customer_id)
        logger.info(f"Inquiry classified | customer={_who(customer_id)} | category={category.value}")

        route = self.select(category)
        async with aclosing(self.respond_stream(message, route, customer_id)) as fragments:
            async for fragment in fragments:
                yield fragment
