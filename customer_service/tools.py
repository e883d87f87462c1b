"""
Tool functions the specialist agents may call on their own
NOTE: The orchestrator never invokes these directly. It attaches a tool set to the agent and pydantic-ai runs the tool-call loop
NOTE: The docstrings are the tool descriptions the model sees, and the Args section becomes the parameter descriptions
NOTE: Tools return strings for "not found" cases so the model can explain the problem to the customer instead of the run crashing
"""

from customer_service.config import AppContext
from customer_service.logger import get_logger
from customer_service.schemas import OrderInfo, ProductInfo, ShippingInfo
from pydantic_ai import RunContext, Tool

logger = get_logger(__name__)


def get_order_info(ctx: RunContext[AppContext], order_id: str) -> OrderInfo:
    """
        Retrieves order information by order ID

        Args:
            order_id: The order ID to retrieve, e.g. ORD-12345
    """
    logger.debug(f"Tool call | tool=get_order_info | order_id={order_id}")
    return ctx.deps.db.get_order_info(order_id)


def track_shipment(ctx: RunContext[AppContext], tracking_number: str) -> ShippingInfo:
    """
        Tracks shipment by tracking number

        Args:
            tracking_number: The tracking number
    """
    logger.debug(f"Tool call | tool=track_shipment | tracking_number={tracking_number}")
    return ctx.deps.db.track_shipment(tracking_number)


def request_refund(ctx: RunContext[AppContext], order_id: str, reason: str) -> str:
    """
        Initiates a refund request for an order

        Args:
            order_id: The order ID
            reason: Reason for refund
    """
    logger.info(f"Refund requested | customer={ctx.deps.customer_id or 'anonymous'} | order_id={order_id} | reason={reason}")
    return ctx.deps.db.request_refund(order_id, reason)


def search_products(ctx: RunContext[AppContext], keyword: str, max_results: int = 10) -> list[ProductInfo]:
    """
        Searches for products by keyword

        Args:
            keyword: Search keyword
            max_results: Maximum number of results (default: 10)
    """
    logger.debug(f"Tool call | tool=search_products | keyword={keyword} | max_results={max_results}")
    return ctx.deps.db.search_products(keyword, max_results)


def get_product_details(ctx: RunContext[AppContext], product_sku: str) -> ProductInfo | str:
    """
        Gets detailed information about a specific product

        Args:
            product_sku: Product SKU, e.g. PROD-001
    """
    try:
        return ctx.deps.db.get_product_details(product_sku)
    except KeyError:
        return f"Product {product_sku} could not be found."


def get_recommendations(ctx: RunContext[AppContext], customer_id: str, count: int = 5) -> list[ProductInfo]:
    """
        Gets personalized product recommendations for a customer

        Args:
            customer_id: Customer ID
            count: Number of recommendations (default: 5)
    """
    return ctx.deps.db.get_recommendations(customer_id, count)


ORDER_TOOLS: tuple[Tool[AppContext], ...] = (
    Tool(get_order_info, takes_ctx=True),
    Tool(track_shipment, takes_ctx=True),
    Tool(request_refund, takes_ctx=True),
)

PRODUCT_TOOLS: tuple[Tool[AppContext], ...] = (
    Tool(search_products, takes_ctx=True),
    Tool(get_product_details, takes_ctx=True),
    Tool(get_recommendations, takes_ctx=True),
)

# The general agent can answer anything, so it gets every tool
ALL_TOOLS: tuple[Tool[AppContext], ...] = ORDER_TOOLS + PRODUCT_TOOLS
