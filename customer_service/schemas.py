"""
This file contains the data shapes shared by the tools, the orchestrator and the HTTP surface
NOTE: The tool return models are the contract between the mock backend and the LLM. pydantic-ai serializes them to JSON for the model
NOTE: The HTTP models use camelCase aliases so the wire format stays {message, customerId} while the Python side stays snake_case
"""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field


class InquiryCategory(str, Enum):
    """
        The category the router assigns to a customer inquiry
        NOTE: Anything the classifier returns outside these three values resolves to GENERAL
    """
    ORDER = "order"
    PRODUCT = "product"
    GENERAL = "general"


class TrackingEvent(BaseModel):
    """A single tracking event"""
    timestamp: datetime
    location: str
    description: str


class ShippingInfo(BaseModel):
    """Shipping and logistics information"""
    tracking_number: str
    carrier: str = Field(description="Carrier name, e.g. DHL, FedEx, UPS")
    status: str
    estimated_delivery_date: datetime | None = None
    actual_delivery_date: datetime | None = None
    shipping_address: str
    tracking_events: list[TrackingEvent] = Field(default_factory=list)


class OrderItem(BaseModel):
    """An item in an order"""
    product_sku: str
    product_name: str
    quantity: int
    unit_price: float = Field(description="Unit price in USD")
    image_url: str | None = None

    @computed_field
    @property
    def total_price(self) -> float:
        return round(self.quantity * self.unit_price, 2)


class OrderInfo(BaseModel):
    """Order information"""
    order_id: str
    customer_id: str
    status: str
    order_date: datetime
    total_amount: float = Field(description="Total order amount in USD")
    items: list[OrderItem] = Field(default_factory=list)
    shipping_info: ShippingInfo | None = None
    payment_method: str
    customer_email: str
    notes: str | None = None


class ProductInfo(BaseModel):
    """Product catalog entry"""
    product_sku: str
    product_name: str
    description: str
    price: float
    in_stock: bool
    category: str
    image_url: str
    rating: float
    review_count: int = 0
    specifications: dict[str, str] | None = None


class InquiryRequest(BaseModel):
    """Body of both inquiry endpoints"""
    model_config = ConfigDict(populate_by_name=True)

    # Defaults to empty so a missing message is reported by the orchestrator's validation, not as a 422
    message: str = ""
    customer_id: str | None = Field(default=None, alias="customerId")


class InquiryResponse(BaseModel):
    """Single-shot reply returned to the customer"""
    message: str
    timestamp: datetime
