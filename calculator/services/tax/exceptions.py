"""
Exceptions raised by the tax schedule configuration.

Calculations themselves never raise for bad numbers (inputs are coerced to
zero). These only surface when a schedule is malformed or a tax year has no
schedule registered.
"""


class TaxConfigurationError(Exception):
    """Base class for tax schedule problems."""


class TaxScheduleError(TaxConfigurationError):
    """A bracket table or rate table breaks its invariants."""


class UnsupportedTaxYear(TaxConfigurationError):
    """No schedule is registered for the requested tax year."""

    def __init__(self, year, available=()):
        self.year = year
        self.available = tuple(sorted(available))
        super().__init__(
            f"No tax schedule for year {year}. "
            f"Available years: {', '.join(str(y) for y in self.available) or 'none'}"
        )
