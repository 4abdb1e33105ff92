from .config import TAX_DISCLAIMER, TaxSchedule, get_schedule
from .exceptions import TaxConfigurationError, TaxScheduleError, UnsupportedTaxYear
from .flat_rate import (
    calculate_cit,
    calculate_informal_tax,
    calculate_pit,
    calculate_sme,
    calculate_vat,
    calculate_wht,
)
from .paye import (
    IncomeDeclaration,
    NigeriaPAYECalculator,
    PAYEResult,
    ReliefSet,
    calculate_paye,
    compute_progressive_tax,
)
