"""
Commission Service
Commission calculation engine: base rate, monthly volume tiers, product category
bonuses and customer loyalty bonuses, composed into one Commission record.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from agentos.models import (
    Agent,
    Commission,
    CommissionBreakdown,
    CommissionStatus,
    Customer,
    LineItem,
    Order,
    OrderDetails,
    ProductBonusLine,
)
from agentos.schemas.commission import (
    CommissionRatesResponse,
    CommissionSummary,
    MonthlyTotals,
    StatusTotals,
    SummaryTotals,
    VolumeTierResponse,
)
from agentos.services.commission_rules import CommissionRules
from agentos.services.store import CommissionStore, CommissionStoreError, OperationResult
from agentos.utils.fallible import fallible
from agentos.utils.periods import as_utc, month_window, next_payout_date, round_currency

logger = logging.getLogger(__name__)

# Failure codes carried by CommissionResult
ORDER_NOT_FOUND = "order_not_found"
ALREADY_CALCULATED = "already_calculated"
CALCULATION_FAILED = "calculation_failed"


@dataclass
class CommissionResult:
    """Outcome of a commission calculation"""
    success: bool
    commission: Optional[Commission] = None
    error: Optional[str] = None
    code: Optional[str] = None
    already_calculated: bool = False


def commission_key(order_id: str, agent_id: str) -> str:
    """Deterministic commission ID, one record per (order, agent)"""
    return f"{order_id}_{agent_id}"


class CommissionService:
    """Service for commission calculation and reporting"""

    def __init__(
        self,
        store: CommissionStore,
        rules: Optional[CommissionRules] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.rules = rules or CommissionRules()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ============ Rate ============

    def resolve_agent(self, agent_id: str) -> Tuple[float, Agent]:
        """
        Resolve the agent's commission rate.

        A missing agent, or a store that cannot be reached, yields a synthetic
        profile at the default rate instead of an error.

        Returns:
            Tuple of (rate, agent profile)
        """
        agent = self._lookup_agent(agent_id)
        if agent is None:
            agent = Agent.synthetic(agent_id, self.rules.default_rate)

        rate = agent.commission_rate
        if rate is None:
            rate = self.rules.default_rate
        return rate, agent

    @fallible(None, label="agent lookup")
    def _lookup_agent(self, agent_id: str) -> Optional[Agent]:
        result = self.store.get_agent(agent_id)
        if not result.success:
            logger.warning(f"Agent {agent_id} not found ({result.error}), using defaults")
            return None
        return result.data

    # ============ Volume bonus ============

    @fallible(0.0, label="volume bonus")
    def calculate_volume_bonus(
        self,
        agent_id: str,
        order_date: datetime,
        monthly_total: Optional[float] = None,
    ) -> float:
        """
        Bonus on the agent's monthly order volume.

        Without `monthly_total`, the month's total is read from commissions already
        persisted in the calendar month of `order_date`. The order being processed is
        not part of that total unless its commission was saved earlier.
        """
        if monthly_total is None:
            monthly_total = self.monthly_order_total(agent_id, order_date)

        tier = self.rules.volume_tier_for(monthly_total)
        if tier is None:
            return 0.0
        return monthly_total * tier.bonus_rate

    def monthly_order_total(self, agent_id: str, order_date: datetime) -> float:
        start, end = month_window(order_date)
        result = self.store.get_agent_commissions(agent_id, start, end)
        if not result.success:
            raise CommissionStoreError(result.error)
        return sum(commission.order_total or 0.0 for commission in result.data)

    # ============ Product bonus ============

    @fallible(lambda: (0.0, []), label="product bonus")
    def calculate_product_bonus(
        self,
        line_items: List[LineItem],
        agent: Optional[Agent] = None,
    ) -> Tuple[float, List[ProductBonusLine]]:
        """
        Category bonus per line item, each item judged on its own quantity and title

        Returns:
            Tuple of (total bonus, per-item category decisions)
        """
        rates = self.rules.bonus_rates(agent.product_bonuses if agent else None)

        lines = []
        for item in line_items or []:
            category = self.rules.category_for(item)
            rate = rates.get(category, 0.0) if category else 0.0
            lines.append(ProductBonusLine(
                title=item.title,
                quantity=item.quantity,
                category=category,
                rate=rate,
                bonus=item.subtotal * rate,
            ))

        return sum(line.bonus for line in lines), lines

    # ============ Customer bonus ============

    @fallible(0.0, label="customer bonus")
    def calculate_customer_bonus(self, customer: Optional[Customer]) -> float:
        if customer is None or not customer.id:
            return 0.0
        if customer.orders_count is None:
            return 0.0

        # New customer check takes priority over loyalty tiers
        if customer.orders_count <= self.rules.new_customer_max_orders:
            return self.rules.new_customer_bonus
        return self.rules.loyalty_bonus(customer.orders_count)

    # ============ Orchestration ============

    def calculate_order_commission(
        self,
        order: Union[Order, Mapping[str, Any]],
        agent_id: str,
        monthly_total: Optional[float] = None,
        persist: bool = True,
    ) -> CommissionResult:
        """
        Calculate, and save, the commission for one order

        Args:
            order: Order model or raw order document
            agent_id: Agent ID
            monthly_total: Monthly volume to use instead of the persisted history
            persist: Save the record and skip orders that already have one

        Returns:
            CommissionResult. Fails only when the order itself cannot be processed.
        """
        try:
            if not isinstance(order, Order):
                order = Order.model_validate(order)

            commission_id = commission_key(order.id, agent_id)

            if persist:
                existing = self._find_commission(commission_id)
                if existing is not None:
                    logger.info(f"Commission {commission_id} already calculated, returning stored record")
                    return CommissionResult(success=True, commission=existing, already_calculated=True)

            calculated_at = self._clock()
            rate, agent = self.resolve_agent(agent_id)

            base_commission = order.total * rate
            volume_bonus = self.calculate_volume_bonus(agent_id, order.created_at or calculated_at, monthly_total)
            product_bonus, product_lines = self.calculate_product_bonus(order.line_items, agent)
            customer_bonus = self.calculate_customer_bonus(order.customer)

            breakdown = CommissionBreakdown(
                base_rate=rate,
                base_commission=base_commission,
                volume_bonus=volume_bonus,
                product_bonus=product_bonus,
                customer_bonus=customer_bonus,
            )

            commission = Commission(
                id=commission_id,
                order_id=order.id,
                order_number=order.number,
                agent_id=agent_id,
                order_total=order.total,
                commission_breakdown=breakdown,
                product_bonus_items=product_lines,
                total_commission=round_currency(breakdown.subtotal),
                currency=order.currency or self.rules.currency,
                status=CommissionStatus.PENDING,
                calculated_at=calculated_at,
                payout_date=next_payout_date(calculated_at),
                order_details=OrderDetails(
                    customer_name=(order.customer.full_name if order.customer else None) or "Unknown",
                    customer_email=order.customer.email if order.customer else None,
                    item_count=len(order.line_items),
                    payment_status=order.financial_status,
                    fulfillment_status=order.fulfillment_status,
                ),
            )
        except Exception as e:
            logger.error(f"Commission calculation error for agent {agent_id}: {e}")
            return CommissionResult(success=False, error=str(e), code=CALCULATION_FAILED)

        if persist:
            self._persist(commission)

        return CommissionResult(success=True, commission=commission)

    def calculate_commission_for_existing_order(self, order_id: str, agent_id: str) -> CommissionResult:
        """Calculate the commission for a synced order and flag the order as done"""
        try:
            result = self.store.get_order(order_id)
        except Exception as e:
            logger.error(f"Order lookup error for {order_id}: {e}")
            return CommissionResult(success=False, error=str(e), code=CALCULATION_FAILED)

        if not result.success or result.data is None:
            return CommissionResult(success=False, error="Order not found", code=ORDER_NOT_FOUND)

        order = result.data
        if order.commission_calculated:
            return CommissionResult(
                success=False,
                error="Commission already calculated for this order",
                code=ALREADY_CALCULATED,
            )

        calculation = self.calculate_order_commission(order, agent_id)
        if calculation.success:
            self._mark_order(order_id, calculation.commission.total_commission)

        return calculation

    @fallible(None, label="commission lookup")
    def _find_commission(self, commission_id: str) -> Optional[Commission]:
        result = self.store.get_commission(commission_id)
        return result.data if result.success else None

    @fallible(None, label="save commission")
    def _save(self, commission: Commission) -> Optional[OperationResult]:
        return self.store.save_commission(commission)

    def _persist(self, commission: Commission) -> bool:
        result = self._save(commission)
        if result is None:
            logger.warning(f"Store unavailable, commission {commission.id} not saved")
            return False
        if not result.success:
            logger.warning(f"Failed to save commission {commission.id}: {result.error}")
            return False

        logger.info(f"Commission saved: {result.id} (RM {commission.total_commission})")
        return True

    def _mark_order(self, order_id: str, amount: float) -> None:
        try:
            result = self.store.mark_order_commission(order_id, amount)
        except Exception as e:
            logger.warning(f"Could not mark order {order_id} as calculated: {e}")
            return
        if not result.success:
            logger.warning(f"Could not mark order {order_id} as calculated: {result.error}")

    # ============ Reporting ============

    def get_agent_commission_summary(
        self,
        agent_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OperationResult:
        """Totals, status split and monthly breakdown of an agent's commissions"""
        try:
            result = self.store.get_agent_commissions(agent_id, start_date, end_date)
        except Exception as e:
            logger.error(f"Commission summary error for agent {agent_id}: {e}")
            return OperationResult.fail(str(e))

        if not result.success:
            return OperationResult.fail(result.error)

        return OperationResult.ok(self.summarize(result.data))

    @staticmethod
    def summarize(commissions: List[Commission]) -> CommissionSummary:
        total = sum(c.total_commission for c in commissions)
        count = len(commissions)

        status: Dict[str, StatusTotals] = {}
        for state in (CommissionStatus.PENDING, CommissionStatus.PAID):
            matching = [c for c in commissions if c.status == state]
            status[state.value] = StatusTotals(
                count=len(matching),
                amount=round_currency(sum(c.total_commission for c in matching)),
            )

        monthly: Dict[str, List[float]] = defaultdict(list)
        for commission in commissions:
            monthly[as_utc(commission.calculated_at).strftime("%Y-%m")].append(commission.total_commission)

        return CommissionSummary(
            totals=SummaryTotals(
                total_commissions=round_currency(total),
                total_orders=count,
                average_commission=round_currency(total / count) if count else 0.0,
            ),
            status=status,
            monthly_breakdown={
                month: MonthlyTotals(
                    total_commission=round_currency(sum(amounts)),
                    order_count=len(amounts),
                    average_commission=round_currency(sum(amounts) / len(amounts)),
                )
                for month, amounts in sorted(monthly.items())
            },
            commissions=sorted(commissions, key=lambda c: as_utc(c.calculated_at), reverse=True),
        )

    def rates(self) -> CommissionRatesResponse:
        """Effective rate configuration"""
        return CommissionRatesResponse(
            default_rate=self.rules.default_rate,
            currency=self.rules.currency,
            product_bonuses=dict(self.rules.product_bonuses),
            volume_tiers=[
                VolumeTierResponse(
                    min_amount=tier.min_amount,
                    bonus_rate=tier.bonus_rate,
                    description=tier.description,
                )
                for tier in sorted(self.rules.volume_tiers, key=lambda t: t.min_amount, reverse=True)
            ],
        )
