"""
Commission store contract
Data access used by the commission engine, plus an in-memory implementation
for local runs and tests.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from agentos.models import Agent, Commission, Order
from agentos.utils.periods import as_utc

logger = logging.getLogger(__name__)


class CommissionStoreError(Exception):
    """Custom exception for commission store errors."""
    pass


@dataclass
class OperationResult:
    """Outcome of a store call: `data` on reads, `id` on writes, `error` on failure"""
    success: bool
    data: Any = None
    id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, id: Optional[str] = None) -> "OperationResult":
        return cls(success=True, data=data, id=id)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)


class CommissionStore(Protocol):
    """Data access the commission engine depends on"""

    def get_agent(self, agent_id: str) -> OperationResult: ...

    def get_agent_commissions(
        self,
        agent_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OperationResult: ...

    def save_commission(self, commission: Commission) -> OperationResult: ...

    def get_commission(self, commission_id: str) -> OperationResult: ...

    def get_order(self, order_id: str) -> OperationResult: ...

    def mark_order_commission(self, order_id: str, amount: float) -> OperationResult: ...


class InMemoryCommissionStore:
    """Dictionary-backed store with the same semantics as the Firestore store"""

    def __init__(self):
        self.agents: Dict[str, Agent] = {}
        self.commissions: Dict[str, Commission] = {}
        self.orders: Dict[str, Order] = {}

    def add_agent(self, agent: Agent) -> Agent:
        self.agents[agent.id] = agent
        return agent

    def add_order(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    def get_agent(self, agent_id: str) -> OperationResult:
        agent = self.agents.get(agent_id)
        if agent is None:
            return OperationResult.fail("Agent not found")
        return OperationResult.ok(agent)

    def get_agent_commissions(
        self,
        agent_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OperationResult:
        commissions = [c for c in self.commissions.values() if c.agent_id == agent_id]
        if start_date is not None:
            commissions = [c for c in commissions if as_utc(c.calculated_at) >= as_utc(start_date)]
        if end_date is not None:
            commissions = [c for c in commissions if as_utc(c.calculated_at) <= as_utc(end_date)]
        commissions.sort(key=lambda c: as_utc(c.calculated_at), reverse=True)
        return OperationResult.ok(commissions)

    def save_commission(self, commission: Commission) -> OperationResult:
        commission_id = commission.id or uuid.uuid4().hex
        if commission_id in self.commissions:
            return OperationResult.fail(f"Commission {commission_id} already exists")
        self.commissions[commission_id] = commission.model_copy(update={"id": commission_id})
        return OperationResult.ok(id=commission_id)

    def get_commission(self, commission_id: str) -> OperationResult:
        commission = self.commissions.get(commission_id)
        if commission is None:
            return OperationResult.fail("Commission not found")
        return OperationResult.ok(commission)

    def get_order(self, order_id: str) -> OperationResult:
        order = self.orders.get(order_id)
        if order is None:
            return OperationResult.fail("Order not found")
        return OperationResult.ok(order)

    def mark_order_commission(self, order_id: str, amount: float) -> OperationResult:
        order = self.orders.get(order_id)
        if order is None:
            return OperationResult.fail("Order not found")
        self.orders[order_id] = order.model_copy(update={"commission_calculated": True})
        logger.debug(f"Order {order_id} marked with commission {amount}")
        return OperationResult.ok(id=order_id)
