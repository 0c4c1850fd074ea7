"""
Tariff pricing rules.

A stored rule row carries every condition column as nullable; parse_rule turns
it into one of four variants that only hold the fields their type needs.
Rows that cannot be turned into a variant are skipped and logged, never raised.
"""
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from ..models import TariffRuleType
from ..services.catalog import TariffRuleRecord

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class Adjustment:
    percent: Optional[Decimal] = None
    fixed: Optional[Decimal] = None

    @property
    def is_empty(self) -> bool:
        return self.percent is None and self.fixed is None

    def apply(self, price: Decimal) -> Decimal:
        # Percentage compounds on the running price, then the fixed amount is added
        if self.percent is not None:
            price += price * self.percent / Decimal(100)
        if self.fixed is not None:
            price += self.fixed
        return price


@dataclass(frozen=True)
class PickupContext:
    """The pickup as seen by rule conditions."""
    local_time: datetime
    hours_until_pickup: float

    @classmethod
    def build(cls, pickup: datetime, now: datetime, timezone_name: Optional[str] = None) -> "PickupContext":
        return cls(
            local_time=to_local_time(pickup, timezone_name),
            hours_until_pickup=(pickup - now).total_seconds() / 3600
        )

    @property
    def minute_of_day(self) -> int:
        return self.local_time.hour * 60 + self.local_time.minute

    @property
    def iso_weekday(self) -> int:
        return self.local_time.isoweekday()

    @property
    def local_date(self) -> date:
        return self.local_time.date()


@dataclass(frozen=True)
class TimeOfDayRule:
    id: int
    adjustment: Adjustment
    start_minute: int
    end_minute: int
    name: Optional[str] = None

    def applies(self, context: PickupContext) -> bool:
        return self.start_minute <= context.minute_of_day <= self.end_minute


@dataclass(frozen=True)
class DayOfWeekRule:
    id: int
    adjustment: Adjustment
    day_of_week: int  # 1=Mon..7=Sun
    name: Optional[str] = None

    def applies(self, context: PickupContext) -> bool:
        return context.iso_weekday == self.day_of_week


@dataclass(frozen=True)
class SeasonRule:
    id: int
    adjustment: Adjustment
    season_from: date
    season_to: date
    name: Optional[str] = None

    def applies(self, context: PickupContext) -> bool:
        return self.season_from <= context.local_date <= self.season_to


@dataclass(frozen=True)
class LastMinuteRule:
    id: int
    adjustment: Adjustment
    hours_before: int
    name: Optional[str] = None

    def applies(self, context: PickupContext) -> bool:
        if context.hours_until_pickup < 0:
            return False
        return context.hours_until_pickup <= self.hours_before


PricingRule = Union[TimeOfDayRule, DayOfWeekRule, SeasonRule, LastMinuteRule]


def _minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def _parse(record: TariffRuleRecord, adjustment: Adjustment):
    """Return (rule, None) or (None, reason)."""
    if adjustment.is_empty:
        return None, "no percentage or fixed adjustment"

    if record.rule_type == TariffRuleType.TIME_OF_DAY.value:
        if record.start_time is None or record.end_time is None:
            return None, "TIME_OF_DAY rule needs start_time and end_time"
        if _minute_of_day(record.start_time) > _minute_of_day(record.end_time):
            # never matches; night windows are stored as two rules, e.g. 22:00-23:59 and 00:00-05:59
            return None, f"TIME_OF_DAY window {record.start_time} starts after its end {record.end_time}"
        return TimeOfDayRule(
            id=record.id,
            adjustment=adjustment,
            start_minute=_minute_of_day(record.start_time),
            end_minute=_minute_of_day(record.end_time),
            name=record.rule_name
        ), None

    if record.rule_type == TariffRuleType.DAY_OF_WEEK.value:
        if record.day_of_week is None or not 1 <= record.day_of_week <= 7:
            return None, f"DAY_OF_WEEK rule has invalid day_of_week {record.day_of_week!r}"
        return DayOfWeekRule(
            id=record.id,
            adjustment=adjustment,
            day_of_week=record.day_of_week,
            name=record.rule_name
        ), None

    if record.rule_type == TariffRuleType.SEASON.value:
        if record.season_from is None or record.season_to is None:
            return None, "SEASON rule needs season_from and season_to"
        return SeasonRule(
            id=record.id,
            adjustment=adjustment,
            season_from=record.season_from,
            season_to=record.season_to,
            name=record.rule_name
        ), None

    if record.rule_type == TariffRuleType.LAST_MINUTE.value:
        if record.hours_before is None:
            return None, "LAST_MINUTE rule needs hours_before"
        return LastMinuteRule(
            id=record.id,
            adjustment=adjustment,
            hours_before=record.hours_before,
            name=record.rule_name
        ), None

    return None, f"unknown rule type {record.rule_type!r}"


def parse_rule(record: TariffRuleRecord) -> Optional[PricingRule]:
    """Build the typed rule for a stored row, or None if the row is incomplete."""
    adjustment = Adjustment(percent=record.perc_adjustment, fixed=record.fixed_adjustment)
    rule, reason = _parse(record, adjustment)
    if rule is None:
        logger.warning(f"Rule evaluation skipped for tariff {record.tariff_id} rule {record.id}: {reason}")
    return rule


def to_local_time(pickup: datetime, timezone_name: Optional[str]) -> datetime:
    """Pickup in the airport's timezone; the submitted offset if it is unknown."""
    if not timezone_name:
        return pickup
    try:
        return pickup.astimezone(ZoneInfo(timezone_name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown airport timezone {timezone_name!r}, using submitted offset")
        return pickup
