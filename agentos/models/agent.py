"""
Agent model - sales representative entitled to commission
"""
from typing import Dict, Optional

from pydantic import BaseModel, Field

from agentos.schemas.common import CamelConfig


class Agent(BaseModel):
    """Agent profile as stored in the users collection"""

    model_config = CamelConfig

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    territory: Optional[str] = None

    # Fraction, 0.05 == 5%. None means "use the system default"
    commission_rate: Optional[float] = None

    # Per-category overrides of the default product bonus table
    product_bonuses: Dict[str, float] = Field(default_factory=dict)

    @classmethod
    def synthetic(cls, agent_id: str, commission_rate: float) -> "Agent":
        """Stand-in profile used when the agent record cannot be loaded"""
        return cls(
            id=agent_id,
            commission_rate=commission_rate,
            territory="Unknown",
            product_bonuses={},
        )
