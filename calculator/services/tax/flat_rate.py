"""
Flat-rate and lookup calculators: VAT, WHT, CIT, PIT, SME and informal
sector presumptive tax.

Each is a single rate or table lookup against the active TaxSchedule.
Amounts are coerced with to_amount and returned as whole naira.
"""
import logging
from decimal import Decimal
from typing import Dict, Optional

from .amounts import round_amount, to_amount
from .config import TaxSchedule, TurnoverTier, get_schedule

logger = logging.getLogger(__name__)

NO_INFORMAL_SCHEDULE_NOTE = (
    "No presumptive schedule for this state. Please consult your state IRS."
)


def _normalise_key(value) -> str:
    return str(value or "").strip().lower()


# =========================
# VAT
# =========================
def calculate_vat(amount, rate_percent=None, zero_rated=False,
                  schedule: Optional[TaxSchedule] = None) -> Dict:
    """
    VAT on a single amount.

    A missing or zero rate falls back to the schedule's standard rate.
    """
    schedule = schedule or get_schedule()
    amount = to_amount(amount)
    rate = to_amount(rate_percent) or schedule.vat_rate_percent

    if zero_rated:
        return {"vat": 0, "note": "Zero-rated (no VAT charged)"}

    return {
        "vat": round_amount(amount * rate / 100),
        "note": "Standard VAT applied",
    }


# =========================
# WHT
# =========================
def calculate_wht(amount, category, schedule: Optional[TaxSchedule] = None) -> Dict:
    schedule = schedule or get_schedule()
    amount = to_amount(amount)
    key = _normalise_key(category)

    rate_percent = schedule.wht_rates_percent.get(key)
    if rate_percent is None:
        logger.warning(f"Unknown WHT category '{category}', using default rate")
        rate_percent = schedule.wht_default_rate_percent

    return {
        "wht": round_amount(amount * rate_percent / 100),
        "rate_percent": rate_percent,
    }


# =========================
# CIT / SME
# =========================
def turnover_tier(turnover, schedule: Optional[TaxSchedule] = None) -> TurnoverTier:
    """Return the first tier whose inclusive upper limit covers ``turnover``."""
    schedule = schedule or get_schedule()
    turnover = to_amount(turnover)
    for tier in schedule.turnover_tiers:
        if turnover <= tier.upper_limit:
            return tier
    return schedule.turnover_tiers[-1]


def calculate_cit(turnover, schedule: Optional[TaxSchedule] = None) -> Dict:
    turnover = to_amount(turnover)
    tier = turnover_tier(turnover, schedule)
    return {"cit": round_amount(turnover * tier.rate)}


def calculate_sme(turnover, assets=None, schedule: Optional[TaxSchedule] = None) -> Dict:
    # assets are collected by the form but do not affect the tier
    turnover = to_amount(turnover)
    tier = turnover_tier(turnover, schedule)
    return {"cit": round_amount(turnover * tier.rate), "note": tier.label}


# =========================
# PIT
# =========================
def calculate_pit(income, schedule: Optional[TaxSchedule] = None) -> Dict:
    schedule = schedule or get_schedule()
    return {"pit": round_amount(to_amount(income) * schedule.pit_rate)}


# =========================
# INFORMAL SECTOR
# =========================
def calculate_informal_tax(state, category,
                           schedule: Optional[TaxSchedule] = None) -> Dict:
    """
    Annual presumptive tax for an informal business.

    An unknown state is not an error: the result carries ``amount=None`` and
    a note pointing the user to their state revenue service.
    """
    schedule = schedule or get_schedule()
    state_key = _normalise_key(state)
    category_key = _normalise_key(category)

    state_schedule = schedule.informal_schedule.get(state_key)
    if state_schedule is None:
        logger.warning(f"No presumptive schedule for state '{state}'")
        return {"amount": None, "note": NO_INFORMAL_SCHEDULE_NOTE}

    amount: Optional[Decimal] = state_schedule.get(category_key)
    if amount is None:
        logger.warning(f"No presumptive rate for '{category}' in {state_key}")
        return {
            "amount": None,
            "note": (
                f"No {state_key.upper()} presumptive rate for this business size. "
                "Please consult your state IRS."
            ),
        }

    return {
        "amount": round_amount(amount),
        "note": f"Using {state_key.upper()} schedule",
    }
