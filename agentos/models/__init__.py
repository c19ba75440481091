"""
Models package - Import all models here for easy access
"""
from agentos.models.agent import Agent
from agentos.models.order import Order, LineItem, Customer
from agentos.models.commission import (
    Commission,
    CommissionBreakdown,
    CommissionStatus,
    OrderDetails,
    ProductBonusLine,
)

__all__ = [
    # Agent
    "Agent",

    # Order
    "Order",
    "LineItem",
    "Customer",

    # Commission
    "Commission",
    "CommissionBreakdown",
    "CommissionStatus",
    "OrderDetails",
    "ProductBonusLine",
]
