"""
Commission model - computed record of money owed to an agent for one order
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from agentos.schemas.common import CamelConfig


class CommissionStatus(str, Enum):
    """Payout status of a commission record"""
    PENDING = "pending"
    PAID = "paid"


class CommissionBreakdown(BaseModel):
    """Individual components, kept unrounded for auditability"""

    model_config = CamelConfig

    base_rate: float
    base_commission: float
    volume_bonus: float = 0.0
    product_bonus: float = 0.0
    customer_bonus: float = 0.0

    @property
    def subtotal(self) -> float:
        return self.base_commission + self.volume_bonus + self.product_bonus + self.customer_bonus


class ProductBonusLine(BaseModel):
    """Category decision for one line item"""

    model_config = CamelConfig

    title: Optional[str] = None
    quantity: Optional[int] = None
    category: Optional[str] = None
    rate: float = 0.0
    bonus: float = 0.0


class OrderDetails(BaseModel):
    """Denormalized order snapshot for reporting"""

    model_config = CamelConfig

    customer_name: str = "Unknown"
    customer_email: Optional[str] = None
    item_count: int = 0
    payment_status: Optional[str] = None
    fulfillment_status: Optional[str] = None


class Commission(BaseModel):
    """Commission record, created once per (order, agent) and never mutated here"""

    model_config = CamelConfig

    id: Optional[str] = None
    order_id: str
    order_number: Optional[str] = None
    agent_id: str
    order_total: float
    commission_breakdown: CommissionBreakdown
    product_bonus_items: List[ProductBonusLine] = Field(default_factory=list)
    total_commission: float
    currency: str = "MYR"
    status: CommissionStatus = CommissionStatus.PENDING
    calculated_at: datetime
    payout_date: datetime
    order_details: OrderDetails = Field(default_factory=OrderDetails)

    def __repr__(self):
        return (
            f"<Commission(id={self.id}, order_id={self.order_id}, "
            f"agent_id={self.agent_id}, total={self.total_commission})>"
        )
