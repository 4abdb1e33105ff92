from rest_framework import serializers

from .services.tax.amounts import to_amount
from .services.tax.config import INFORMAL_CATEGORIES, WHT_CATEGORIES


class AmountField(serializers.Field):
    """
    Lenient money input.

    Blank, null, non-numeric and negative values are read as 0 instead of
    failing validation.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('help_text', 'Amount in Naira (NGN)')
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return to_amount(data)

    def to_representation(self, value):
        return str(to_amount(value))


class LookupKeyField(serializers.CharField):
    """
    Free-form lookup key (WHT category, state, business size).

    Null and non-text values are read as '' so the lookup falls back to its
    default instead of failing validation.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('default', '')
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            return ''
        return super().to_internal_value(data)


class FlagField(serializers.BooleanField):
    """
    Yes/no flag. Anything that is not a recognised true value is False.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('default', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        try:
            return data in self.TRUE_VALUES
        except TypeError:
            # unhashable, e.g. a list or an object
            return False


# ======================================================
# Request serializers
# ======================================================
class PAYEInputSerializer(serializers.Serializer):
    """
    Annual employment income for a PAYE calculation.

    housing_allowance is treated as rent paid for rent relief.
    """
    gross_salary = AmountField()
    basic_salary = AmountField()
    housing_allowance = AmountField(help_text='Housing allowance (treated as rent paid)')
    transport_allowance = AmountField()
    utility_allowance = AmountField()
    leave_allowance = AmountField()
    other_allowances = AmountField()
    nhis_contribution = AmountField()
    life_assurance_premium = AmountField()


class VATInputSerializer(serializers.Serializer):
    amount = AmountField()
    rate = AmountField(help_text='VAT rate in percent (default 7.5)')
    zero_rated = FlagField(help_text='True/"yes" for zero-rated supplies; anything else is standard rated')


class WHTInputSerializer(serializers.Serializer):
    amount = AmountField()
    category = LookupKeyField(
        help_text=f"One of {', '.join(WHT_CATEGORIES)}; anything else uses 5%"
    )


class TurnoverInputSerializer(serializers.Serializer):
    turnover = AmountField(help_text='Annual turnover in Naira (NGN)')


class SMEInputSerializer(TurnoverInputSerializer):
    assets = AmountField(help_text='Total assets in Naira (not used for the tier)')


class PITInputSerializer(serializers.Serializer):
    income = AmountField(help_text='Declared annual income in Naira (NGN)')


class InformalTaxInputSerializer(serializers.Serializer):
    state = LookupKeyField()
    category = LookupKeyField(
        help_text=f"Business size: {', '.join(INFORMAL_CATEGORIES)}"
    )


# ======================================================
# Response serializers
# ======================================================
class TaxResponseSerializer(serializers.Serializer):
    tax_year = serializers.IntegerField()
    disclaimer = serializers.CharField()


# very important serializer below
class PAYEResultSerializer(TaxResponseSerializer):
    """
    PAYE breakdown.

    All monetary values are whole Naira. effective_rate is a percentage of
    gross salary.
    """
    gross_salary = serializers.IntegerField()
    basic_salary = serializers.IntegerField()
    housing_allowance = serializers.IntegerField()
    transport_allowance = serializers.IntegerField()
    utility_allowance = serializers.IntegerField()
    leave_allowance = serializers.IntegerField()
    other_allowances = serializers.IntegerField()
    nhis_contribution = serializers.IntegerField()
    life_assurance_premium = serializers.IntegerField()
    consolidated_relief_allowance = serializers.IntegerField(
        help_text="Higher of ₦200,000 or 21% of gross"
    )
    pension_contribution = serializers.IntegerField(help_text="8% of basic salary")
    rent_relief = serializers.IntegerField(
        help_text="Lower of ₦500,000 or 20% of rent paid"
    )
    taxable_before_exemption = serializers.IntegerField()
    taxable_after_exemption = serializers.IntegerField(
        help_text="Taxable income above the ₦800,000 exemption"
    )
    annual_tax = serializers.IntegerField()
    monthly_tax = serializers.IntegerField()
    effective_rate = serializers.DecimalField(
        max_digits=7, decimal_places=2,
        help_text="Annual tax as a percentage of gross salary"
    )


class VATResultSerializer(TaxResponseSerializer):
    vat = serializers.IntegerField()
    note = serializers.CharField()


class WHTResultSerializer(TaxResponseSerializer):
    wht = serializers.IntegerField()
    rate_percent = serializers.DecimalField(max_digits=5, decimal_places=2)


class CITResultSerializer(TaxResponseSerializer):
    cit = serializers.IntegerField()


class SMEResultSerializer(CITResultSerializer):
    note = serializers.CharField()


class PITResultSerializer(TaxResponseSerializer):
    pit = serializers.IntegerField()


class InformalTaxResultSerializer(TaxResponseSerializer):
    amount = serializers.IntegerField(allow_null=True)
    note = serializers.CharField()


class TaxBandSerializer(serializers.Serializer):
    upper_limit = serializers.SerializerMethodField()
    rate = serializers.DecimalField(max_digits=5, decimal_places=4)

    def get_upper_limit(self, band):
        # The top band is unbounded
        if band.upper_limit.is_infinite():
            return None
        return int(band.upper_limit)


class TurnoverTierSerializer(serializers.Serializer):
    upper_limit = serializers.SerializerMethodField()
    rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    label = serializers.CharField()

    def get_upper_limit(self, tier):
        if tier.upper_limit.is_infinite():
            return None
        return int(tier.upper_limit)


class TaxScheduleSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    cra_minimum = serializers.DecimalField(max_digits=15, decimal_places=2)
    cra_gross_rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    pension_rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    rent_relief_rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    rent_relief_cap = serializers.DecimalField(max_digits=15, decimal_places=2)
    exemption_threshold = serializers.DecimalField(max_digits=15, decimal_places=2)
    paye_bands = TaxBandSerializer(many=True)
    vat_rate_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    wht_rates_percent = serializers.DictField(child=serializers.DecimalField(max_digits=5, decimal_places=2))
    wht_default_rate_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    turnover_tiers = TurnoverTierSerializer(many=True)
    pit_rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    informal_schedule = serializers.SerializerMethodField()

    def get_informal_schedule(self, schedule):
        return {
            state: {category: int(amount) for category, amount in rates.items()}
            for state, rates in schedule.informal_schedule.items()
        }
