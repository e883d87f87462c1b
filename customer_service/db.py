"""
    This module contains the commerce backend contract and a mock implementation for simulating a cross-border store
    NOTE: The tools only talk to CommerceBackend, so a real order/catalog service can replace MockDB without touching the orchestrator
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from customer_service.schemas import OrderInfo, OrderItem, ProductInfo, ShippingInfo, TrackingEvent


class CommerceBackend(ABC):
    """Order, shipping and catalog operations the agent tools rely on"""

    @abstractmethod
    def get_order_info(self, order_id: str) -> OrderInfo:
        ...

    @abstractmethod
    def track_shipment(self, tracking_number: str) -> ShippingInfo:
        ...

    @abstractmethod
    def request_refund(self, order_id: str, reason: str) -> str:
        """Submit a refund request and return a confirmation that includes a reference code"""
        ...

    @abstractmethod
    def search_products(self, keyword: str, max_results: int = 10) -> list[ProductInfo]:
        ...

    @abstractmethod
    def get_product_details(self, sku: str) -> ProductInfo:
        """Raise KeyError when the SKU is not in the catalog"""
        ...

    @abstractmethod
    def get_recommendations(self, customer_id: str, count: int = 5) -> list[ProductInfo]:
        ...


class MockDB(CommerceBackend):
    """
        Mock backend that includes sample order, shipment and product data
        NOTE: Any order ID or tracking number resolves to the same sample shipment, dated relative to now
    """
    def __init__(self):
        self.products = {
            "PROD-001": ProductInfo(
                product_sku="PROD-001",
                product_name="Wireless Bluetooth Headphones",
                description="Premium noise-canceling headphones with 30-hour battery life",
                price=79.99,
                in_stock=True,
                category="Electronics",
                image_url="https://example.com/headphones.jpg",
                rating=4.5,
                review_count=1234,
                specifications={
                    "Battery Life": "30 hours",
                    "Connectivity": "Bluetooth 5.0",
                    "Weight": "250g",
                    "Color Options": "Black, Silver, Blue",
                },
            ),
            "PROD-002": ProductInfo(
                product_sku="PROD-002",
                product_name="USB-C Fast Charger",
                description="65W fast charging adapter with foldable plug",
                price=25.00,
                in_stock=True,
                category="Accessories",
                image_url="https://example.com/charger.jpg",
                rating=4.7,
                review_count=842,
                specifications={"Output": "65W", "Ports": "1x USB-C", "Plug": "Foldable"},
            ),
            "PROD-003": ProductInfo(
                product_sku="PROD-003",
                product_name="Smartphone Case",
                description="Durable protective case with kickstand",
                price=15.99,
                in_stock=True,
                category="Accessories",
                image_url="https://example.com/case.jpg",
                rating=4.3,
                review_count=517,
                specifications={"Material": "TPU and polycarbonate", "Kickstand": "Yes"},
            ),
            "PROD-004": ProductInfo(
                product_sku="PROD-004",
                product_name="Wireless Mouse",
                description="Ergonomic wireless mouse with precision tracking",
                price=29.99,
                in_stock=True,
                category="Accessories",
                image_url="https://example.com/mouse.jpg",
                rating=4.6,
                review_count=389,
                specifications={"DPI": "800-3200", "Battery": "AA x1"},
            ),
            "PROD-005": ProductInfo(
                product_sku="PROD-005",
                product_name="Laptop Stand",
                description="Adjustable aluminum laptop stand for better ergonomics",
                price=39.99,
                in_stock=True,
                category="Accessories",
                image_url="https://example.com/stand.jpg",
                rating=4.8,
                review_count=271,
                specifications={"Material": "Aluminum", "Max Load": "10kg"},
            ),
        }

        # searchable catalog vs. the items the recommendation engine suggests
        self.searchable_skus = ["PROD-001", "PROD-002", "PROD-003"]
        self.recommended_skus = ["PROD-004", "PROD-005"]

    def _tracking_events(self, now: datetime) -> list[TrackingEvent]:
        return [
            TrackingEvent(timestamp=now - timedelta(days=2), location="Shanghai, China",
                          description="Package departed from origin facility"),
            TrackingEvent(timestamp=now - timedelta(days=1), location="Los Angeles, CA, USA",
                          description="Arrived at customs"),
            TrackingEvent(timestamp=now, location="New York, NY, USA",
                          description="Out for delivery"),
        ]

    def track_shipment(self, tracking_number: str) -> ShippingInfo:
        """Fetch the shipment status for a tracking number"""
        now = datetime.now(timezone.utc)
        return ShippingInfo(
            tracking_number=tracking_number,
            carrier="DHL Express",
            status="In Transit",
            estimated_delivery_date=now + timedelta(days=2),
            shipping_address="123 Main St, New York, NY 10001, USA",
            tracking_events=self._tracking_events(now),
        )

    def get_order_info(self, order_id: str) -> OrderInfo:
        """Fetch an order with its items and shipping information"""
        now = datetime.now(timezone.utc)
        headphones = self.products["PROD-001"]
        charger = self.products["PROD-002"]
        return OrderInfo(
            order_id=order_id,
            customer_id="CUST-12345",
            status="Shipped",
            order_date=now - timedelta(days=5),
            total_amount=299.99,
            payment_method="Credit Card",
            customer_email="customer@example.com",
            items=[
                OrderItem(product_sku=headphones.product_sku, product_name=headphones.product_name,
                          quantity=1, unit_price=headphones.price, image_url=headphones.image_url),
                OrderItem(product_sku=charger.product_sku, product_name=charger.product_name,
                          quantity=2, unit_price=charger.price, image_url=charger.image_url),
            ],
            shipping_info=self.track_shipment("TRK123456789"),
        )

    def request_refund(self, order_id: str, reason: str) -> str:
        reference = f"REF-{uuid.uuid4().hex[:8].upper()}"
        return (
            f"Refund request submitted successfully for order {order_id}. "
            f"Reference number: {reference}. "
            "Expected processing time: 5-7 business days. "
            "You will receive a confirmation email shortly."
        )

    def search_products(self, keyword: str, max_results: int = 10) -> list[ProductInfo]:
        """Case-insensitive substring match on product name or description"""
        needle = keyword.casefold()
        matches = [
            self.products[sku] for sku in self.searchable_skus
            if needle in self.products[sku].product_name.casefold()
            or needle in self.products[sku].description.casefold()
        ]
        return matches[:max(max_results, 0)]

    def get_product_details(self, sku: str) -> ProductInfo:
        return self.products[sku]

    def get_recommendations(self, customer_id: str, count: int = 5) -> list[ProductInfo]:
        """Personalized picks. The mock ignores the customer and truncates to count"""
        picks = [self.products[sku] for sku in self.recommended_skus]
        return picks[:max(count, 0)]
