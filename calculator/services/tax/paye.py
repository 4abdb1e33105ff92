import logging
from dataclasses import asdict, dataclass, fields
from decimal import Decimal
from typing import Mapping, Optional, Sequence, Tuple

from .amounts import ZERO, round_amount, round_percent, to_amount
from .config import TaxBand, TaxSchedule, get_schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomeDeclaration:
    """
    Annual employment income and deductions for one PAYE calculation.

    housing_allowance doubles as rent paid for rent relief. Transport,
    utility and leave allowances are recorded but do not reduce taxable
    income; only other_allowances does.
    """
    gross_salary: Decimal = ZERO
    basic_salary: Decimal = ZERO
    housing_allowance: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    utility_allowance: Decimal = ZERO
    leave_allowance: Decimal = ZERO
    other_allowances: Decimal = ZERO
    nhis_contribution: Decimal = ZERO
    life_assurance_premium: Decimal = ZERO

    def __post_init__(self):
        for field in fields(self):
            object.__setattr__(self, field.name, to_amount(getattr(self, field.name)))

    @classmethod
    def from_mapping(cls, data: Mapping) -> "IncomeDeclaration":
        names = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})


@dataclass(frozen=True)
class ReliefSet:
    consolidated_relief_allowance: Decimal
    pension_contribution: Decimal
    rent_relief: Decimal
    statutory_exemption: Decimal


@dataclass(frozen=True)
class PAYEResult:
    gross_salary: int
    basic_salary: int
    housing_allowance: int
    transport_allowance: int
    utility_allowance: int
    leave_allowance: int
    other_allowances: int
    nhis_contribution: int
    life_assurance_premium: int
    consolidated_relief_allowance: int
    pension_contribution: int
    rent_relief: int
    taxable_before_exemption: int
    taxable_after_exemption: int
    annual_tax: int
    monthly_tax: int
    effective_rate: Decimal
    tax_year: int

    def as_dict(self):
        return asdict(self)


def compute_progressive_tax(
    amount_above_exemption: Decimal,
    bands: Sequence[TaxBand],
    exemption_threshold: Decimal,
) -> int:
    """
    Apply the PAYE bands to income that is already net of the exemption.

    Band limits are absolute, so the exemption only anchors the lower bound
    of the first band; it is never subtracted again here.
    """
    tax = ZERO
    remaining = to_amount(amount_above_exemption)
    lower_bound = exemption_threshold

    for band in bands:
        if remaining <= 0:
            break
        band_width = band.upper_limit - lower_bound
        taxable_in_band = max(ZERO, min(remaining, band_width))
        tax += taxable_in_band * band.rate
        remaining -= taxable_in_band
        lower_bound = band.upper_limit

    return round_amount(tax)


class NigeriaPAYECalculator:
    """
    Nigeria PAYE calculator for employment income.

    Order of work:
    1. Reliefs (CRA, pension, rent relief)
    2. Taxable income before and after the ₦800,000 exemption
    3. Progressive bands on the amount above the exemption
    4. Monthly tax and effective rate on gross
    """

    def __init__(self, schedule: Optional[TaxSchedule] = None):
        self.schedule = schedule or get_schedule()

    # =========================
    # RELIEFS
    # =========================
    def compute_reliefs(self, declaration: IncomeDeclaration) -> ReliefSet:
        schedule = self.schedule

        cra = round_amount(max(
            schedule.cra_minimum,
            declaration.gross_salary * schedule.cra_gross_rate,
        ))
        pension = round_amount(declaration.basic_salary * schedule.pension_rate)
        rent_relief = min(
            schedule.rent_relief_cap,
            declaration.housing_allowance * schedule.rent_relief_rate,
        )

        return ReliefSet(
            consolidated_relief_allowance=Decimal(cra),
            pension_contribution=Decimal(pension),
            rent_relief=rent_relief,
            statutory_exemption=schedule.exemption_threshold,
        )

    # =========================
    # TAXABLE INCOME
    # =========================
    def compute_taxable_income(
        self, declaration: IncomeDeclaration, reliefs: ReliefSet
    ) -> Tuple[Decimal, Decimal]:
        taxable_before_exemption = max(
            ZERO,
            declaration.gross_salary
            - reliefs.consolidated_relief_allowance
            - reliefs.pension_contribution
            - declaration.nhis_contribution
            - declaration.life_assurance_premium
            - reliefs.rent_relief
            - declaration.other_allowances,
        )
        taxable_after_exemption = max(
            ZERO, taxable_before_exemption - reliefs.statutory_exemption
        )
        return taxable_before_exemption, taxable_after_exemption

    def compute_progressive_tax(self, amount_above_exemption: Decimal) -> int:
        return compute_progressive_tax(
            amount_above_exemption,
            self.schedule.paye_bands,
            self.schedule.exemption_threshold,
        )

    # =========================
    # PAYE
    # =========================
    def calculate_paye(self, declaration) -> PAYEResult:
        if not isinstance(declaration, IncomeDeclaration):
            declaration = IncomeDeclaration.from_mapping(declaration or {})

        reliefs = self.compute_reliefs(declaration)
        before, after = self.compute_taxable_income(declaration, reliefs)
        annual_tax = self.compute_progressive_tax(after)
        monthly_tax = round_amount(Decimal(annual_tax) / 12)

        gross = declaration.gross_salary
        if gross > 0:
            effective_rate = round_percent(Decimal(annual_tax) * 100 / gross)
        else:
            effective_rate = Decimal("0.00")

        logger.debug(
            f"PAYE {self.schedule.year}: gross={gross} cra={reliefs.consolidated_relief_allowance} "
            f"pension={reliefs.pension_contribution} rent_relief={reliefs.rent_relief} "
            f"taxable={before}/{after} annual={annual_tax}"
        )

        return PAYEResult(
            gross_salary=round_amount(gross),
            basic_salary=round_amount(declaration.basic_salary),
            housing_allowance=round_amount(declaration.housing_allowance),
            transport_allowance=round_amount(declaration.transport_allowance),
            utility_allowance=round_amount(declaration.utility_allowance),
            leave_allowance=round_amount(declaration.leave_allowance),
            other_allowances=round_amount(declaration.other_allowances),
            nhis_contribution=round_amount(declaration.nhis_contribution),
            life_assurance_premium=round_amount(declaration.life_assurance_premium),
            consolidated_relief_allowance=round_amount(reliefs.consolidated_relief_allowance),
            pension_contribution=round_amount(reliefs.pension_contribution),
            rent_relief=round_amount(reliefs.rent_relief),
            taxable_before_exemption=round_amount(before),
            taxable_after_exemption=round_amount(after),
            annual_tax=annual_tax,
            monthly_tax=monthly_tax,
            effective_rate=effective_rate,
            tax_year=self.schedule.year,
        )


def calculate_paye(declaration, schedule: Optional[TaxSchedule] = None) -> PAYEResult:
    return NigeriaPAYECalculator(schedule).calculate_paye(declaration)
