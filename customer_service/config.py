"""
    This module contains the configuration required for the application to run
    NOTE: AgentSettings is built once at startup and passed explicitly to the AgentFactory. It is never read from a global
    NOTE: AppContext is the per-request data, the backend inside it is the shared infrastructure
"""

import os
from dataclasses import dataclass
from customer_service.db import CommerceBackend
from customer_service.errors import ConfigurationError
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL_ID = "gpt-4o-mini"
GITHUB_MODELS_ENDPOINT = "https://models.github.ai/inference"
SERVICE_NAME = os.getenv("SERVICE_NAME", "CrossBorder ERP Customer Service")

# The classifier should be close to deterministic, the specialists can be more conversational
CLASSIFIER_TEMPERATURE = 0.3
AGENT_TEMPERATURE = 0.7

# Upper bound on tool-call round trips for one response. One extra request is allowed for the final answer
MAX_TOOL_ROUNDS = 5


@dataclass(frozen=True)
class AgentSettings:
    """Credentials and model identifier shared by every agent role"""
    github_token: str
    model_id: str = DEFAULT_MODEL_ID
    endpoint: str = GITHUB_MODELS_ENDPOINT

    @classmethod
    def from_env(cls) -> "AgentSettings":
        return cls(
            github_token=os.getenv("GITHUB_TOKEN", "").strip(),
            model_id=os.getenv("MODEL_ID", "").strip() or DEFAULT_MODEL_ID,
            endpoint=os.getenv("GITHUB_MODELS_ENDPOINT", "").strip() or GITHUB_MODELS_ENDPOINT,
        )

    @property
    def has_token(self) -> bool:
        return bool(self.github_token and self.github_token.strip())

    def require_credentials(self) -> None:
        """Raise ConfigurationError unless both the token and the model id are set"""
        if not self.has_token:
            raise ConfigurationError(
                "GITHUB_TOKEN environment variable is not set. "
                "Please set it with your GitHub Personal Access Token."
            )
        if not self.model_id or not self.model_id.strip():
            raise ConfigurationError("Model ID cannot be empty")


@dataclass
class AppContext:
    """Per-request dependencies handed to the agent tools"""
    db: CommerceBackend
    # Only used for logging today. Routing and tools do not depend on it
    customer_id: str | None = None


def get_cors_origins() -> list[str]:
    # comma-separated origins, or * for all
    raw = os.getenv("CORS_ORIGINS", "*").strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


CLASSIFICATION_PROMPT_TEMPLATE = """You are a customer service router. Analyze the customer message and classify it into ONE category:
- 'order' for order tracking, status, refunds, or returns
- 'product' for product information, recommendations, or availability
- 'general' for anything else

Respond with ONLY the category word (order, product, or general).

Customer message: {message}"""

ORDER_SYSTEM_PROMPT = """You are a helpful order management specialist for a cross-border e-commerce platform.
You assist customers with:
- Tracking orders and shipments
- Checking order status
- Processing refund requests
- Answering questions about delivery

Be professional, empathetic, and provide accurate information using the available tools.
Always confirm order details before making changes."""

PRODUCT_SYSTEM_PROMPT = """You are a knowledgeable product consultant for a cross-border e-commerce platform.
You assist customers with:
- Finding products based on their needs
- Providing detailed product information
- Making personalized recommendations
- Answering questions about availability and specifications

Be enthusiastic, helpful, and focus on understanding customer needs.
Provide relevant product suggestions based on their interests."""

GENERAL_SYSTEM_PROMPT = """You are a friendly and professional customer service representative for a cross-border e-commerce platform.
You assist customers with all types of inquiries including orders, products, and general questions.
Use the available tools when needed to provide accurate information.
Be helpful, polite, and efficient in resolving customer issues."""

FALLBACK_REPLY = "I apologize, but I couldn't process your request. Please try again."
EMPTY_MESSAGE_STREAM_ERROR = "Error: Message cannot be empty"
