"""
Commission rule tables
Default rate, monthly volume tiers, product categories and customer loyalty tiers.
All values are immutable and injected into CommissionService.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class VolumeTier:
    """Monthly volume bracket"""
    min_amount: float
    bonus_rate: float

    @property
    def description(self) -> str:
        return f"RM{self.min_amount / 1000:g}k+ = {self.bonus_rate * 100:g}% bonus"


@dataclass(frozen=True)
class CategoryRule:
    """
    Maps a line item to a product bonus category.

    Matches when the item quantity reaches `min_quantity`, or when the lower-cased
    title contains any of `keywords`.
    """
    category: str
    keywords: Tuple[str, ...] = ()
    min_quantity: Optional[int] = None

    def matches(self, item) -> bool:
        if self.min_quantity is not None and (item.quantity or 0) >= self.min_quantity:
            return True
        title = (item.title or "").lower()
        return any(keyword in title for keyword in self.keywords)


@dataclass(frozen=True)
class CustomerTier:
    """Flat bonus for customers with at least `min_orders` lifetime orders"""
    min_orders: int
    bonus: float


BULK_ORDERS = "Bulk Orders"
BAJU_MELAYU = "Baju Melayu"
KURUNG_BATIK = "Kurung Batik"
TRADITIONAL_WEAR = "Traditional Wear"
SATIN_VALENTINO = "Satin Valentino"
PREMIUM_COTTON = "Premium Cotton"
BATIK_FABRIC = "Batik Fabric"

# Evaluated top to bottom, first match wins
DEFAULT_CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(BULK_ORDERS, min_quantity=5),
    CategoryRule(BAJU_MELAYU, ("baju melayu", "adam tradisional", "muhammad")),
    CategoryRule(KURUNG_BATIK, ("kurung batik", "alana", "sedondon")),
    CategoryRule(TRADITIONAL_WEAR, ("tradisional", "pesak", "cekak musang")),
    CategoryRule(SATIN_VALENTINO, ("satin valentino", "satin paloma")),
    CategoryRule(PREMIUM_COTTON, ("cotton", "premium", "eksklusif")),
    CategoryRule(BATIK_FABRIC, ("batik", "fabric", "kain")),
)

DEFAULT_PRODUCT_BONUSES: Mapping[str, float] = MappingProxyType({
    BATIK_FABRIC: 0.01,
    BAJU_MELAYU: 0.025,
    KURUNG_BATIK: 0.025,
    PREMIUM_COTTON: 0.015,
    SATIN_VALENTINO: 0.02,
    TRADITIONAL_WEAR: 0.03,
    BULK_ORDERS: 0.015,
})

DEFAULT_VOLUME_TIERS: Tuple[VolumeTier, ...] = (
    VolumeTier(10000, 0.02),
    VolumeTier(5000, 0.015),
    VolumeTier(2000, 0.01),
    VolumeTier(1000, 0.005),
)

DEFAULT_LOYALTY_TIERS: Tuple[CustomerTier, ...] = (
    CustomerTier(10, 20.0),
    CustomerTier(5, 10.0),
)


@dataclass(frozen=True)
class CommissionRules:
    """Complete rule set used by one CommissionService"""

    default_rate: float = 0.05
    currency: str = "MYR"
    volume_tiers: Tuple[VolumeTier, ...] = DEFAULT_VOLUME_TIERS
    category_rules: Tuple[CategoryRule, ...] = DEFAULT_CATEGORY_RULES
    product_bonuses: Mapping[str, float] = field(default_factory=lambda: DEFAULT_PRODUCT_BONUSES)

    # Customers at or below this order count are new (the current order is counted)
    new_customer_max_orders: int = 1
    new_customer_bonus: float = 50.0
    loyalty_tiers: Tuple[CustomerTier, ...] = DEFAULT_LOYALTY_TIERS

    def volume_tier_for(self, monthly_total: float) -> Optional[VolumeTier]:
        """Highest tier reached by `monthly_total`, or None below the lowest tier"""
        for tier in sorted(self.volume_tiers, key=lambda t: t.min_amount, reverse=True):
            if monthly_total >= tier.min_amount:
                return tier
        return None

    def category_for(self, item) -> Optional[str]:
        for rule in self.category_rules:
            if rule.matches(item):
                return rule.category
        return None

    def bonus_rates(self, overrides: Optional[Mapping[str, float]] = None) -> Dict[str, float]:
        """Default category rates with an agent's overrides applied on top"""
        rates = dict(self.product_bonuses)
        rates.update(overrides or {})
        return rates

    def loyalty_bonus(self, orders_count: int) -> float:
        for tier in sorted(self.loyalty_tiers, key=lambda t: t.min_orders, reverse=True):
            if orders_count >= tier.min_orders:
                return tier.bonus
        return 0.0
