"""
Commission Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from agentos.models import Commission
from agentos.schemas.common import CamelConfig


# ============ Request Schemas ============

class CommissionCalculateRequest(BaseModel):
    """Schema for calculating a commission from raw order data"""

    model_config = CamelConfig

    # Order stays a raw mapping, the engine reports malformed orders itself
    order: Optional[Dict[str, Any]] = Field(None, description="Order document")
    agent_id: Optional[str] = Field(None, description="Agent ID")


class CommissionSimulateRequest(BaseModel):
    """Schema for simulating commissions on the sample orders"""

    model_config = CamelConfig

    agent_id: Optional[str] = Field(None, description="Agent ID, defaults to AGT-001")


# ============ Response Schemas ============

class SummaryTotals(BaseModel):
    model_config = CamelConfig

    total_commissions: float = 0.0
    total_orders: int = 0
    average_commission: float = 0.0


class StatusTotals(BaseModel):
    model_config = CamelConfig

    count: int = 0
    amount: float = 0.0


class MonthlyTotals(BaseModel):
    model_config = CamelConfig

    total_commission: float = 0.0
    order_count: int = 0
    average_commission: float = 0.0


class CommissionSummary(BaseModel):
    """Aggregated commission statistics for one agent"""

    model_config = CamelConfig

    totals: SummaryTotals
    status: Dict[str, StatusTotals]
    monthly_breakdown: Dict[str, MonthlyTotals]
    commissions: List[Commission]


class VolumeTierResponse(BaseModel):
    model_config = CamelConfig

    min_amount: float
    bonus_rate: float
    description: str


class CommissionRatesResponse(BaseModel):
    """Effective commission rate configuration"""

    model_config = CamelConfig

    default_rate: float
    currency: str
    product_bonuses: Dict[str, float]
    volume_tiers: List[VolumeTierResponse]
