"""
Rule Evaluator for transfer tariffs
Calculates a tariff's quoted total from its base price, extra passengers and pricing rules
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
import logging

from ..services.catalog import TariffRecord, TariffRuleRecord
from .rules import PickupContext, parse_rule

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class AppliedRule:
    rule_id: int
    rule_type: str
    price_before: Decimal
    price_after: Decimal


@dataclass
class PriceBreakdown:
    base_price: Decimal
    total_price: Decimal
    applied_rules: List[AppliedRule] = field(default_factory=list)
    skipped_rule_ids: List[int] = field(default_factory=list)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, halves away from zero"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_base_price(tariff: TariffRecord, total_pax: int) -> Decimal:
    """Base price plus the per-passenger rate for every passenger after the first"""
    price = tariff.base_price
    if tariff.price_per_pax is not None:
        price += tariff.price_per_pax * max(0, total_pax - 1)
    return price


def evaluate_price(
    tariff: TariffRecord,
    rules: Sequence[TariffRuleRecord],
    total_pax: int,
    pickup: datetime,
    now: datetime,
    timezone_name: Optional[str] = None
) -> PriceBreakdown:
    """
    Price one tariff for one pickup.

    Rules are applied in the order given; each applicable rule adjusts the
    running price, so order matters when percentages are involved.
    """
    context = PickupContext.build(pickup, now, timezone_name)
    base_price = calculate_base_price(tariff, total_pax)
    breakdown = PriceBreakdown(base_price=base_price, total_price=base_price)

    price = base_price
    for record in rules:
        rule = parse_rule(record)
        if rule is None:
            breakdown.skipped_rule_ids.append(record.id)
            continue
        if not rule.applies(context):
            continue

        adjusted = rule.adjustment.apply(price)
        breakdown.applied_rules.append(AppliedRule(
            rule_id=rule.id,
            rule_type=record.rule_type,
            price_before=price,
            price_after=adjusted
        ))
        price = adjusted

    breakdown.total_price = round_money(price)
    logger.debug(
        f"Tariff {tariff.id}: base {base_price} -> {breakdown.total_price} "
        f"({len(breakdown.applied_rules)} rules applied)"
    )
    return breakdown


def compute_price(
    tariff: TariffRecord,
    rules: Sequence[TariffRuleRecord],
    total_pax: int,
    pickup: datetime,
    now: datetime,
    timezone_name: Optional[str] = None
) -> Decimal:
    """Quoted total for a tariff, rounded to 2 decimals"""
    return evaluate_price(tariff, rules, total_pax, pickup, now, timezone_name).total_price
