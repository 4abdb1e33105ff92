"""
Tax configuration for Nigeria (2026 schedule).

Every rate table used by the calculators lives here, grouped per tax year
into a TaxSchedule. Adding a new year means adding a new TaxSchedule and
registering it in TAX_SCHEDULES; the calculators do not change.

PAYE notes (2026):
- CRA is the higher of ₦200,000 or 1% + 20% of gross income
- Pension is 8% of basic salary
- Rent relief is the lower of ₦500,000 or 20% of rent paid
- First ₦800,000 of taxable income is exempt
- PAYE bands below are ABSOLUTE upper limits; the first band starts at the
  ₦800,000 exemption
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from django.conf import settings

from .exceptions import TaxScheduleError, UnsupportedTaxYear


@dataclass(frozen=True)
class TaxBand:
    upper_limit: Decimal  # absolute, Decimal("Infinity") for the top band
    rate: Decimal  # marginal rate as a fraction, 0.15 == 15%


@dataclass(frozen=True)
class TurnoverTier:
    upper_limit: Decimal  # inclusive
    rate: Decimal
    label: str


@dataclass(frozen=True)
class TaxSchedule:
    """All rates and thresholds for a single tax year."""

    year: int

    # PAYE reliefs
    cra_minimum: Decimal
    cra_gross_rate: Decimal
    pension_rate: Decimal
    rent_relief_rate: Decimal
    rent_relief_cap: Decimal
    exemption_threshold: Decimal
    paye_bands: Tuple[TaxBand, ...]

    # Flat-rate taxes
    vat_rate_percent: Decimal
    wht_rates_percent: Mapping[str, Decimal]
    wht_default_rate_percent: Decimal
    turnover_tiers: Tuple[TurnoverTier, ...]
    pit_rate: Decimal
    informal_schedule: Mapping[str, Mapping[str, Decimal]]


def validate_bands(bands, lower_bound):
    """
    Check a PAYE bracket table.

    Limits must be strictly increasing and start above ``lower_bound``, the
    last limit must be unbounded and every rate must lie in [0, 1].
    """
    if not bands:
        raise TaxScheduleError("Bracket table is empty")

    previous = lower_bound
    for band in bands:
        if band.upper_limit <= previous:
            raise TaxScheduleError(
                f"Band limit {band.upper_limit} is not above {previous}"
            )
        if not Decimal("0") <= band.rate <= Decimal("1"):
            raise TaxScheduleError(f"Band rate {band.rate} is outside [0, 1]")
        previous = band.upper_limit

    if not bands[-1].upper_limit.is_infinite():
        raise TaxScheduleError("Last band must be unbounded")


def validate_turnover_tiers(tiers):
    previous = Decimal("-1")
    for tier in tiers:
        if tier.upper_limit <= previous:
            raise TaxScheduleError(
                f"Turnover tier {tier.upper_limit} is not above {previous}"
            )
        previous = tier.upper_limit
    if not tiers or not tiers[-1].upper_limit.is_infinite():
        raise TaxScheduleError("Last turnover tier must be unbounded")


# =========================
# 2026 SCHEDULE
# =========================
SCHEDULE_2026 = TaxSchedule(
    year=2026,
    cra_minimum=Decimal("200000"),
    cra_gross_rate=Decimal("0.01") + Decimal("0.20"),  # 1% + 20% of gross
    pension_rate=Decimal("0.08"),
    rent_relief_rate=Decimal("0.20"),
    rent_relief_cap=Decimal("500000"),
    exemption_threshold=Decimal("800000"),
    paye_bands=(
        # (absolute upper limit, marginal rate)
        TaxBand(Decimal("1600000"), Decimal("0.15")),
        TaxBand(Decimal("5000000"), Decimal("0.19")),
        TaxBand(Decimal("10000000"), Decimal("0.20")),
        TaxBand(Decimal("20000000"), Decimal("0.22")),
        TaxBand(Decimal("30000000"), Decimal("0.24")),
        TaxBand(Decimal("Infinity"), Decimal("0.25")),
    ),
    vat_rate_percent=Decimal("7.5"),
    wht_rates_percent=MappingProxyType({
        "contract": Decimal("5"),
        "consultancy": Decimal("5"),
        "rent": Decimal("10"),
        "dividend": Decimal("10"),
        "interest": Decimal("10"),
    }),
    wht_default_rate_percent=Decimal("5"),
    turnover_tiers=(
        TurnoverTier(Decimal("25000000"), Decimal("0"), "Micro business — 0% CIT"),
        TurnoverTier(Decimal("100000000"), Decimal("0.20"), "SME bracket 20% CIT"),
        TurnoverTier(Decimal("Infinity"), Decimal("0.30"), "Standard CIT 30%"),
    ),
    pit_rate=Decimal("0.10"),
    informal_schedule=MappingProxyType({
        "lagos": MappingProxyType({
            "micro": Decimal("8100"),
            "small": Decimal("12000"),
            "medium": Decimal("24000"),
        }),
        "oyo": MappingProxyType({
            "micro": Decimal("500"),
            "small": Decimal("5000"),
            "medium": Decimal("50000"),
        }),
    }),
)


TAX_SCHEDULES: Dict[int, TaxSchedule] = {}


def register_schedule(schedule: TaxSchedule) -> TaxSchedule:
    validate_bands(schedule.paye_bands, schedule.exemption_threshold)
    validate_turnover_tiers(schedule.turnover_tiers)
    TAX_SCHEDULES[schedule.year] = schedule
    return schedule


register_schedule(SCHEDULE_2026)


def get_schedule(year: Optional[int] = None) -> TaxSchedule:
    """
    Return the schedule for ``year``, defaulting to ``settings.TAX_YEAR``.

    Raises UnsupportedTaxYear when no schedule is registered for the year.
    """
    if year is None:
        year = getattr(settings, "TAX_YEAR", 2026)
    try:
        return TAX_SCHEDULES[int(year)]
    except (KeyError, TypeError, ValueError):
        raise UnsupportedTaxYear(year, TAX_SCHEDULES.keys())


# =========================
# METADATA
# =========================
WHT_CATEGORIES = tuple(SCHEDULE_2026.wht_rates_percent.keys())
INFORMAL_CATEGORIES = ("micro", "small", "medium")

TAX_DISCLAIMER = (
    "The tax calculations on this site are estimates and not legal or tax "
    "advice. Consult a licensed tax professional for personalised help."
)
