"""
Order model - synced Shopify order as read by the commission engine
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from agentos.schemas.common import CamelConfig


class LineItem(BaseModel):
    """Single product line of an order"""

    model_config = CamelConfig

    id: Optional[str] = None
    title: Optional[str] = ""
    vendor: Optional[str] = None
    quantity: Optional[int] = 1
    price: Optional[float] = 0.0
    sku: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return (self.price or 0.0) * (self.quantity or 0)


class Customer(BaseModel):
    """Customer snapshot embedded in an order"""

    model_config = CamelConfig

    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    orders_count: Optional[int] = None
    total_spent: Optional[float] = None


class Order(BaseModel):
    """
    Order as stored by the order-sync subsystem.

    `total` and `line_items` are required; everything else degrades to defaults
    so that ad-hoc orders (simulations, manual calculations) are accepted.
    """

    model_config = CamelConfig

    id: str
    order_number: Optional[str] = None
    name: Optional[str] = None
    total: float
    currency: Optional[str] = None
    created_at: Optional[datetime] = None
    line_items: List[LineItem]
    customer: Optional[Customer] = None
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    commission_calculated: bool = False

    @property
    def number(self) -> Optional[str]:
        """Display number, Shopify uses `name` (e.g. #3122) when no order number is set"""
        return self.order_number or self.name

    def __repr__(self):
        return f"<Order(id={self.id}, total={self.total}, items={len(self.line_items)})>"
