"""
Unit tests for the commission rule tables

Volume tier selection, product category priority and agent overrides.
"""
import pytest

from agentos.models import LineItem
from agentos.services.commission_rules import (
    BATIK_FABRIC,
    BAJU_MELAYU,
    BULK_ORDERS,
    KURUNG_BATIK,
    PREMIUM_COTTON,
    SATIN_VALENTINO,
    TRADITIONAL_WEAR,
    CategoryRule,
    CommissionRules,
    VolumeTier,
)


@pytest.fixture
def rules():
    return CommissionRules()


class TestVolumeTiers:

    @pytest.mark.parametrize("monthly_total, expected_rate", [
        (0, None),
        (999.99, None),
        (1000, 0.005),
        (1999.99, 0.005),
        (2000, 0.01),
        (4999.99, 0.01),
        (5000, 0.015),
        (9999.99, 0.015),
        (10000, 0.02),
        (250000, 0.02),
    ])
    def test_tier_selection(self, rules, monthly_total, expected_rate):
        tier = rules.volume_tier_for(monthly_total)
        rate = tier.bonus_rate if tier else None
        assert rate == expected_rate

    def test_exact_boundary_uses_higher_tier(self, rules):
        assert rules.volume_tier_for(10000.00).bonus_rate == 0.02

    def test_rate_is_non_decreasing_in_monthly_total(self, rules):
        totals = [i * 250.0 for i in range(0, 60)]
        rates = [(rules.volume_tier_for(t).bonus_rate if rules.volume_tier_for(t) else 0.0) for t in totals]
        assert rates == sorted(rates)

    def test_unordered_tier_table_still_prefers_highest(self):
        rules = CommissionRules(volume_tiers=(
            VolumeTier(1000, 0.005),
            VolumeTier(10000, 0.02),
            VolumeTier(5000, 0.015),
        ))
        assert rules.volume_tier_for(12000).bonus_rate == 0.02

    def test_descriptions(self, rules):
        descriptions = [tier.description for tier in rules.volume_tiers]
        assert descriptions == [
            "RM10k+ = 2% bonus",
            "RM5k+ = 1.5% bonus",
            "RM2k+ = 1% bonus",
            "RM1k+ = 0.5% bonus",
        ]


class TestProductCategories:

    @pytest.mark.parametrize("title, expected", [
        ("Baju Melayu Cekak Musang Hijau", BAJU_MELAYU),
        ("ADAM TRADISIONAL K1 INDIGO", BAJU_MELAYU),
        ("Set Muhammad Slimfit", BAJU_MELAYU),
        ("Kurung Batik Alana", KURUNG_BATIK),
        ("Sedondon Keluarga", KURUNG_BATIK),
        ("Kemeja Pesak Gantung", TRADITIONAL_WEAR),
        ("Cekak Musang Moden", TRADITIONAL_WEAR),
        ("Satin Paloma Dress", SATIN_VALENTINO),
        ("Satin Valentino Shawl", SATIN_VALENTINO),
        ("Premium Cotton Shirt", PREMIUM_COTTON),
        ("Tudung Eksklusif", PREMIUM_COTTON),
        ("Kain Batik Lepas", BATIK_FABRIC),
        ("Printed fabric 2m", BATIK_FABRIC),
        ("Gift Card", None),
        ("", None),
    ])
    def test_category_by_title(self, rules, title, expected):
        assert rules.category_for(LineItem(title=title, quantity=1, price=10)) == expected

    def test_bulk_quantity_beats_title(self, rules):
        bulk = LineItem(title="Kain Batik Lepas", quantity=5, price=20)
        assert rules.category_for(bulk) == BULK_ORDERS

    def test_four_items_is_not_bulk(self, rules):
        assert rules.category_for(LineItem(title="Basic Cotton Scarf", quantity=4, price=20)) == PREMIUM_COTTON

    def test_matching_is_case_insensitive(self, rules):
        assert rules.category_for(LineItem(title="KURUNG BATIK", quantity=1)) == KURUNG_BATIK

    def test_priority_follows_table_order(self, rules):
        # Matches Baju Melayu, Traditional Wear, Satin Valentino and Batik Fabric keywords
        title = "Baju Melayu Pesak Satin Paloma Batik"
        assert rules.category_for(LineItem(title=title, quantity=1)) == BAJU_MELAYU

    def test_custom_rule_table(self):
        rules = CommissionRules(category_rules=(CategoryRule("Songket", ("songket",)),))
        assert rules.category_for(LineItem(title="Songket Emas", quantity=1)) == "Songket"
        assert rules.category_for(LineItem(title="Kain Batik", quantity=1)) is None


class TestBonusRates:

    def test_defaults(self, rules):
        rates = rules.bonus_rates()
        assert rates[BATIK_FABRIC] == 0.01
        assert rates[TRADITIONAL_WEAR] == 0.03
        assert rates[BULK_ORDERS] == 0.015
        assert len(rates) == 7

    def test_agent_override_replaces_single_category(self, rules):
        rates = rules.bonus_rates({KURUNG_BATIK: 0.05})
        assert rates[KURUNG_BATIK] == 0.05
        assert rates[BAJU_MELAYU] == 0.025

    def test_empty_override_keeps_defaults(self, rules):
        assert rules.bonus_rates({}) == rules.bonus_rates()

    def test_defaults_are_not_mutated(self, rules):
        rules.bonus_rates({KURUNG_BATIK: 0.5})
        assert rules.product_bonuses[KURUNG_BATIK] == 0.025


class TestLoyaltyBonus:

    @pytest.mark.parametrize("orders_count, expected", [
        (2, 0.0),
        (4, 0.0),
        (5, 10.0),
        (9, 10.0),
        (10, 20.0),
        (100, 20.0),
    ])
    def test_loyalty_tiers(self, rules, orders_count, expected):
        assert rules.loyalty_bonus(orders_count) == expected
