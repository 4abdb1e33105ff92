from django import forms

from calculator.services.tax import (
    NigeriaPAYECalculator,
    calculate_cit,
    calculate_informal_tax,
    calculate_pit,
    calculate_sme,
    calculate_vat,
    calculate_wht,
)
from calculator.services.tax.amounts import to_amount

INPUT_CLASS = 'w-full px-4 py-3 border border-gray-300 rounded-lg focus:outline-none focus:ring-2 focus:ring-green-500'


class AmountField(forms.Field):
    """
    Naira amount input. Blank or invalid entries are read as 0.
    """
    widget = forms.NumberInput

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)

    def widget_attrs(self, widget):
        attrs = super().widget_attrs(widget)
        attrs.update({'class': INPUT_CLASS, 'min': '0', 'step': 'any', 'placeholder': '0'})
        return attrs

    def to_python(self, value):
        return to_amount(value)


def select():
    return forms.Select(attrs={'class': INPUT_CLASS})


class TaxForm(forms.Form):
    """
    Base for calculator forms.

    ``calculate`` returns a display-ready result:
        {'headline': (label, value), 'rows': [(label, value, kind)], 'note': str}
    where kind is 'money', 'percent' or 'text'.
    """
    title = ''

    def calculate(self, schedule=None):
        raise NotImplementedError


class PAYEForm(TaxForm):
    title = 'PAYE (Employees)'

    gross_salary = AmountField(label='Annual gross salary')
    basic_salary = AmountField(label='Basic salary')
    housing_allowance = AmountField(label='Housing allowance / rent paid')
    transport_allowance = AmountField(label='Transport allowance')
    utility_allowance = AmountField(label='Utility allowance')
    leave_allowance = AmountField(label='Leave allowance')
    other_allowances = AmountField(label='Other allowances')
    nhis_contribution = AmountField(label='NHIS contribution')
    life_assurance_premium = AmountField(label='Life assurance premium')

    def calculate(self, schedule=None):
        result = NigeriaPAYECalculator(schedule).calculate_paye(self.cleaned_data)
        return {
            'headline': ('Annual PAYE', result.annual_tax),
            'rows': [
                ('Gross Salary', result.gross_salary, 'money'),
                ('Pension (8% of basic)', result.pension_contribution, 'money'),
                ('CRA Applied', result.consolidated_relief_allowance, 'money'),
                ('NHIS', result.nhis_contribution, 'money'),
                ('Life Assurance', result.life_assurance_premium, 'money'),
                ('Rent Relief (claimed)', result.rent_relief, 'money'),
                ('Taxable before exemption', result.taxable_before_exemption, 'money'),
                ('Taxable after ₦800,000 exemption', result.taxable_after_exemption, 'money'),
                ('Monthly PAYE (approx)', result.monthly_tax, 'money'),
                ('Effective tax rate (on gross)', result.effective_rate, 'percent'),
            ],
            'note': '',
        }


class VATForm(TaxForm):
    title = 'VAT'

    amount = AmountField(label='Amount')
    rate = AmountField(label='VAT rate (%)', initial='7.5')
    zero_rated = forms.ChoiceField(
        label='Zero-rated?',
        choices=[('no', 'No'), ('yes', 'Yes')],
        initial='no',
        required=False,
        widget=select(),
    )

    def calculate(self, schedule=None):
        data = self.cleaned_data
        result = calculate_vat(
            data['amount'], data['rate'], data.get('zero_rated') == 'yes',
            schedule=schedule
        )
        return {'headline': ('VAT', result['vat']), 'rows': [], 'note': result['note']}


class WHTForm(TaxForm):
    title = 'Withholding Tax'

    category = forms.ChoiceField(
        label='Payment type',
        choices=[
            ('contract', 'Contract / Supplies'),
            ('consultancy', 'Consultancy / Professional fees'),
            ('rent', 'Rent'),
            ('dividend', 'Dividend'),
            ('interest', 'Interest'),
        ],
        widget=select(),
    )
    amount = AmountField(label='Amount')

    def calculate(self, schedule=None):
        result = calculate_wht(
            self.cleaned_data['amount'], self.cleaned_data['category'], schedule=schedule
        )
        return {
            'headline': ('WHT', result['wht']),
            'rows': [('WHT Rate', result['rate_percent'], 'percent')],
            'note': '',
        }


class CITForm(TaxForm):
    title = 'Companies Income Tax'

    turnover = AmountField(label='Annual turnover')

    def calculate(self, schedule=None):
        result = calculate_cit(self.cleaned_data['turnover'], schedule=schedule)
        return {'headline': ('CIT payable', result['cit']), 'rows': [], 'note': ''}


class PITForm(TaxForm):
    title = 'Personal Income Tax'

    income = AmountField(label='Annual income')

    def calculate(self, schedule=None):
        result = calculate_pit(self.cleaned_data['income'], schedule=schedule)
        return {'headline': ('PIT payable', result['pit']), 'rows': [], 'note': ''}


class SMEForm(TaxForm):
    title = 'SME Tax'

    turnover = AmountField(label='Annual turnover')
    assets = AmountField(label='Total assets')

    def calculate(self, schedule=None):
        data = self.cleaned_data
        result = calculate_sme(data['turnover'], data['assets'], schedule=schedule)
        return {'headline': ('Estimated CIT', result['cit']), 'rows': [], 'note': result['note']}


class InformalTaxForm(TaxForm):
    title = 'Informal Sector (Presumptive)'

    state = forms.ChoiceField(
        label='State',
        choices=[
            ('lagos', 'Lagos'),
            ('oyo', 'Oyo'),
            ('fct', 'FCT Abuja'),
            ('kano', 'Kano'),
            ('rivers', 'Rivers'),
        ],
        widget=select(),
    )
    category = forms.ChoiceField(
        label='Business size',
        choices=[('micro', 'Micro'), ('small', 'Small'), ('medium', 'Medium')],
        widget=select(),
    )

    def calculate(self, schedule=None):
        result = calculate_informal_tax(
            self.cleaned_data['state'], self.cleaned_data['category'], schedule=schedule
        )
        headline = None
        if result['amount'] is not None:
            headline = ('Annual Presumptive Tax', result['amount'])
        return {'headline': headline, 'rows': [], 'note': result['note']}


TAX_FORMS = {
    'paye': PAYEForm,
    'vat': VATForm,
    'wht': WHTForm,
    'cit': CITForm,
    'pit': PITForm,
    'sme': SMEForm,
    'informal': InformalTaxForm,
}
