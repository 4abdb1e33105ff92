from decimal import Decimal

from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from .services.tax import (
    IncomeDeclaration,
    NigeriaPAYECalculator,
    TaxScheduleError,
    UnsupportedTaxYear,
    calculate_cit,
    calculate_informal_tax,
    calculate_paye,
    calculate_pit,
    calculate_sme,
    calculate_vat,
    calculate_wht,
    compute_progressive_tax,
    get_schedule,
)
from .services.tax.amounts import round_amount, to_amount
from .services.tax.config import SCHEDULE_2026, TaxBand, validate_bands


def progressive_tax(amount):
    return compute_progressive_tax(
        Decimal(amount), SCHEDULE_2026.paye_bands, SCHEDULE_2026.exemption_threshold
    )


class AmountCoercionTest(SimpleTestCase):
    """Test lenient amount parsing"""

    def test_missing_and_blank_are_zero(self):
        self.assertEqual(to_amount(None), Decimal('0'))
        self.assertEqual(to_amount(''), Decimal('0'))
        self.assertEqual(to_amount('   '), Decimal('0'))

    def test_invalid_and_negative_are_zero(self):
        self.assertEqual(to_amount('abc'), Decimal('0'))
        self.assertEqual(to_amount('-5000'), Decimal('0'))
        self.assertEqual(to_amount(-1), Decimal('0'))
        self.assertEqual(to_amount('NaN'), Decimal('0'))
        self.assertEqual(to_amount('Infinity'), Decimal('0'))
        self.assertEqual(to_amount([1, 2]), Decimal('0'))
        self.assertEqual(to_amount(True), Decimal('0'))

    def test_valid_values(self):
        self.assertEqual(to_amount('1,500,000'), Decimal('1500000'))
        self.assertEqual(to_amount(0.1), Decimal('0.1'))
        self.assertEqual(to_amount(250), Decimal('250'))

    def test_out_of_range_amounts_are_zero(self):
        self.assertEqual(to_amount('1e1000'), Decimal('0'))
        self.assertEqual(to_amount('1e999999'), Decimal('0'))
        self.assertEqual(to_amount(1e400), Decimal('0'))

    def test_round_beyond_context_precision(self):
        self.assertEqual(round_amount(Decimal('1e30')), 10 ** 30)
        self.assertEqual(round_amount(Decimal('2.5e40')), 25 * 10 ** 39)

    def test_huge_amounts_through_calculators(self):
        """Test amounts past 28 digits still produce a result"""
        result = calculate_paye({'gross_salary': '1e30'})
        self.assertGreater(result.annual_tax, 0)
        self.assertEqual(result.consolidated_relief_allowance, 21 * 10 ** 28)
        self.assertEqual(result.effective_rate, Decimal('19.75'))

        self.assertEqual(calculate_cit('1e29'), {'cit': 3 * 10 ** 28})
        self.assertEqual(calculate_pit(1e300), {'pit': 10 ** 299})
        self.assertEqual(calculate_vat('1e40', 10)['vat'], 10 ** 39)

    def test_round_half_up(self):
        self.assertEqual(round_amount(Decimal('0.5')), 1)
        self.assertEqual(round_amount(Decimal('987.6')), 988)
        self.assertEqual(round_amount(Decimal('120000.19')), 120000)


class TaxScheduleTest(SimpleTestCase):
    """Test schedule configuration and validation"""

    def test_default_schedule_is_2026(self):
        schedule = get_schedule()
        self.assertEqual(schedule.year, 2026)
        self.assertEqual(schedule.exemption_threshold, Decimal('800000'))
        self.assertEqual(len(schedule.paye_bands), 6)
        self.assertTrue(schedule.paye_bands[-1].upper_limit.is_infinite())

    @override_settings(TAX_YEAR=2031)
    def test_unconfigured_default_year(self):
        with self.assertRaises(UnsupportedTaxYear):
            get_schedule()

    def test_unknown_year(self):
        with self.assertRaises(UnsupportedTaxYear) as ctx:
            get_schedule(1999)
        self.assertIn('2026', str(ctx.exception))

    def test_non_numeric_year(self):
        with self.assertRaises(UnsupportedTaxYear):
            get_schedule('last-year')

    def test_bands_must_increase(self):
        bands = (
            TaxBand(Decimal('2000000'), Decimal('0.15')),
            TaxBand(Decimal('1500000'), Decimal('0.19')),
            TaxBand(Decimal('Infinity'), Decimal('0.25')),
        )
        with self.assertRaises(TaxScheduleError):
            validate_bands(bands, Decimal('800000'))

    def test_first_band_must_start_above_exemption(self):
        bands = (
            TaxBand(Decimal('800000'), Decimal('0.15')),
            TaxBand(Decimal('Infinity'), Decimal('0.25')),
        )
        with self.assertRaises(TaxScheduleError):
            validate_bands(bands, Decimal('800000'))

    def test_rate_out_of_range(self):
        bands = (TaxBand(Decimal('Infinity'), Decimal('1.5')),)
        with self.assertRaises(TaxScheduleError):
            validate_bands(bands, Decimal('800000'))

    def test_last_band_must_be_unbounded(self):
        bands = (TaxBand(Decimal('1600000'), Decimal('0.15')),)
        with self.assertRaises(TaxScheduleError):
            validate_bands(bands, Decimal('800000'))


class ProgressiveTaxTest(SimpleTestCase):
    """Test PAYE bands applied to income above the exemption"""

    def test_zero_amount(self):
        self.assertEqual(progressive_tax(0), 0)

    def test_first_band_filled_exactly(self):
        # 800,000 above the exemption reaches the ₦1.6m limit
        self.assertEqual(progressive_tax(800000), 120000)

    def test_just_over_first_band(self):
        self.assertEqual(progressive_tax(800100), 120000 + 19)

    def test_spills_into_second_band(self):
        # Band limits are absolute and the first band starts at the ₦800,000
        # exemption, so it is only ₦800,000 wide (up to ₦1.6m).
        # 800,000 @15% + 800,000 @19%
        self.assertEqual(progressive_tax(1600000), 272000)
        # 800,000 @15% + 1,200,000 @19%
        self.assertEqual(progressive_tax(2000000), 348000)

    def test_all_finite_bands(self):
        # Up to the ₦30m limit
        self.assertEqual(progressive_tax(29200000), 6366000)

    def test_top_band_unbounded(self):
        self.assertEqual(progressive_tax(30200000), 6366000 + 250000)

    def test_negative_amount(self):
        self.assertEqual(progressive_tax(-500), 0)

    def test_monotonic(self):
        amounts = [0, 1, 799999, 800000, 800001, 4200000, 4200001, 9200000,
                   19200000, 29200000, 29200001, 100000000]
        taxes = [progressive_tax(amount) for amount in amounts]
        self.assertEqual(taxes, sorted(taxes))


class PAYECalculatorTest(SimpleTestCase):
    """Test the PAYE engine end to end"""

    def setUp(self):
        self.calculator = NigeriaPAYECalculator()
        self.declaration = IncomeDeclaration(
            gross_salary=Decimal('6000000'),
            basic_salary=Decimal('3000000'),
            housing_allowance=Decimal('1200000'),
            transport_allowance=Decimal('600000'),
            nhis_contribution=Decimal('50000'),
        )

    def test_reliefs(self):
        reliefs = self.calculator.compute_reliefs(self.declaration)
        self.assertEqual(reliefs.consolidated_relief_allowance, Decimal('1260000'))
        self.assertEqual(reliefs.pension_contribution, Decimal('240000'))
        self.assertEqual(reliefs.rent_relief, Decimal('240000'))
        self.assertEqual(reliefs.statutory_exemption, Decimal('800000'))

    def test_cra_floor(self):
        for gross in (0, 1, 500000, 952380):
            reliefs = self.calculator.compute_reliefs(IncomeDeclaration(gross_salary=gross))
            self.assertEqual(reliefs.consolidated_relief_allowance, Decimal('200000'))

    def test_pension_rounded(self):
        reliefs = self.calculator.compute_reliefs(IncomeDeclaration(basic_salary=12345))
        self.assertEqual(reliefs.pension_contribution, Decimal('988'))

    def test_rent_relief_cap(self):
        reliefs = self.calculator.compute_reliefs(IncomeDeclaration(housing_allowance=5000000))
        self.assertEqual(reliefs.rent_relief, Decimal('500000'))

    def test_taxable_income(self):
        reliefs = self.calculator.compute_reliefs(self.declaration)
        before, after = self.calculator.compute_taxable_income(self.declaration, reliefs)
        self.assertEqual(before, Decimal('4210000'))
        self.assertEqual(after, Decimal('3410000'))

    def test_calculate_paye(self):
        result = self.calculator.calculate_paye(self.declaration)
        self.assertEqual(result.taxable_before_exemption, 4210000)
        self.assertEqual(result.taxable_after_exemption, 3410000)
        self.assertEqual(result.annual_tax, 615900)
        self.assertEqual(result.monthly_tax, 51325)
        self.assertEqual(result.effective_rate, Decimal('10.27'))
        self.assertEqual(result.tax_year, 2026)

    def test_transport_utility_leave_not_deducted(self):
        without = calculate_paye({'gross_salary': 6000000, 'basic_salary': 3000000})
        with_allowances = calculate_paye({
            'gross_salary': 6000000,
            'basic_salary': 3000000,
            'transport_allowance': 400000,
            'utility_allowance': 300000,
            'leave_allowance': 200000,
        })
        self.assertEqual(without.annual_tax, with_allowances.annual_tax)
        self.assertEqual(without.taxable_before_exemption, with_allowances.taxable_before_exemption)

    def test_other_allowances_deducted(self):
        base = calculate_paye({'gross_salary': 6000000})
        reduced = calculate_paye({'gross_salary': 6000000, 'other_allowances': 100000})
        self.assertEqual(
            base.taxable_before_exemption - reduced.taxable_before_exemption, 100000
        )

    def test_income_below_exemption(self):
        result = calculate_paye({'gross_salary': 1000000, 'basic_salary': 500000})
        self.assertEqual(result.consolidated_relief_allowance, 210000)
        self.assertEqual(result.pension_contribution, 40000)
        self.assertEqual(result.rent_relief, 0)
        self.assertEqual(result.taxable_before_exemption, 750000)
        self.assertEqual(result.taxable_after_exemption, 0)
        self.assertEqual(result.annual_tax, 0)
        self.assertEqual(result.monthly_tax, 0)
        self.assertEqual(result.effective_rate, Decimal('0'))

    def test_zero_gross(self):
        result = calculate_paye({})
        self.assertEqual(result.annual_tax, 0)
        self.assertEqual(result.effective_rate, Decimal('0.00'))

    def test_invalid_inputs_default_to_zero(self):
        result = calculate_paye({'gross_salary': 'abc', 'basic_salary': -100, 'unknown': 5})
        self.assertEqual(result.gross_salary, 0)
        self.assertEqual(result.basic_salary, 0)
        self.assertEqual(result.annual_tax, 0)

    def test_idempotent(self):
        first = self.calculator.calculate_paye(self.declaration)
        second = self.calculator.calculate_paye(self.declaration)
        self.assertEqual(first, second)


class FlatRateCalculatorTest(SimpleTestCase):
    """Test VAT, WHT, CIT, PIT, SME and informal sector calculators"""

    def test_vat_standard(self):
        self.assertEqual(
            calculate_vat(100000, 7.5, False),
            {'vat': 7500, 'note': 'Standard VAT applied'}
        )

    def test_vat_zero_rated(self):
        result = calculate_vat(100000, 7.5, True)
        self.assertEqual(result['vat'], 0)
        self.assertEqual(result['note'], 'Zero-rated (no VAT charged)')

    def test_vat_default_rate(self):
        self.assertEqual(calculate_vat(100000, None)['vat'], 7500)
        self.assertEqual(calculate_vat(100000, 0)['vat'], 7500)
        self.assertEqual(calculate_vat(100000, 5)['vat'], 5000)

    def test_wht_categories(self):
        self.assertEqual(calculate_wht(1000000, 'rent'), {'wht': 100000, 'rate_percent': Decimal('10')})
        self.assertEqual(calculate_wht(1000000, 'contract')['wht'], 50000)
        self.assertEqual(calculate_wht(1000000, 'Dividend')['wht'], 100000)

    def test_wht_unknown_category(self):
        result = calculate_wht(1000000, 'royalty')
        self.assertEqual(result['wht'], 50000)
        self.assertEqual(result['rate_percent'], Decimal('5'))

    def test_cit_tiers(self):
        self.assertEqual(calculate_cit(25000000), {'cit': 0})
        self.assertEqual(calculate_cit(25000001), {'cit': round_amount(Decimal('25000001') * Decimal('0.20'))})
        self.assertEqual(calculate_cit(100000000), {'cit': 20000000})
        self.assertEqual(calculate_cit(100000001), {'cit': 30000000})

    def test_pit(self):
        self.assertEqual(calculate_pit(1234567), {'pit': 123457})
        self.assertEqual(calculate_pit(None), {'pit': 0})

    def test_sme_labels(self):
        self.assertEqual(calculate_sme(10000000, 0), {'cit': 0, 'note': 'Micro business — 0% CIT'})
        self.assertEqual(
            calculate_sme(50000000, 999999999),
            {'cit': 10000000, 'note': 'SME bracket 20% CIT'}
        )
        self.assertEqual(calculate_sme(200000000), {'cit': 60000000, 'note': 'Standard CIT 30%'})

    def test_informal_known_state(self):
        self.assertEqual(
            calculate_informal_tax('lagos', 'micro'),
            {'amount': 8100, 'note': 'Using LAGOS schedule'}
        )
        self.assertEqual(calculate_informal_tax(' Oyo ', 'medium')['amount'], 50000)

    def test_informal_unknown_state(self):
        result = calculate_informal_tax('unknown', 'micro')
        self.assertIsNone(result['amount'])
        self.assertIn('No presumptive schedule', result['note'])

    def test_informal_unknown_category(self):
        result = calculate_informal_tax('lagos', 'large')
        self.assertIsNone(result['amount'])


class TaxAPITest(APITestCase):
    """Test tax calculation API endpoints"""

    def test_paye(self):
        response = self.client.post('/api/tax/paye/', {
            'gross_salary': '6000000',
            'basic_salary': '3000000',
            'housing_allowance': '1200000',
            'transport_allowance': '600000',
            'nhis_contribution': '50000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['annual_tax'], 615900)
        self.assertEqual(response.data['monthly_tax'], 51325)
        self.assertEqual(response.data['effective_rate'], '10.27')
        self.assertEqual(response.data['rent_relief'], 240000)
        self.assertEqual(response.data['tax_year'], 2026)
        self.assertIn('disclaimer', response.data)

    def test_paye_lenient_inputs(self):
        response = self.client.post('/api/tax/paye/', {
            'gross_salary': 'not-a-number',
            'basic_salary': None,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['gross_salary'], 0)
        self.assertEqual(response.data['annual_tax'], 0)
        self.assertEqual(response.data['effective_rate'], '0.00')

    def test_unsupported_tax_year(self):
        response = self.client.post('/api/tax/paye/?tax_year=1999', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_vat(self):
        response = self.client.post('/api/tax/vat/', {
            'amount': '100000', 'rate': '7.5', 'zero_rated': False
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['vat'], 7500)
        self.assertEqual(response.data['note'], 'Standard VAT applied')

        response = self.client.post('/api/tax/vat/', {
            'amount': '100000', 'zero_rated': True
        }, format='json')
        self.assertEqual(response.data['vat'], 0)

    def test_wht(self):
        response = self.client.post('/api/tax/wht/', {
            'amount': '2000000', 'category': 'rent'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['wht'], 200000)
        self.assertEqual(response.data['rate_percent'], '10.00')

    def test_cit_and_sme(self):
        response = self.client.post('/api/tax/cit/', {'turnover': '25000000'}, format='json')
        self.assertEqual(response.data['cit'], 0)

        response = self.client.post('/api/tax/sme/', {
            'turnover': '50000000', 'assets': '10000000'
        }, format='json')
        self.assertEqual(response.data['cit'], 10000000)
        self.assertEqual(response.data['note'], 'SME bracket 20% CIT')

    def test_pit(self):
        response = self.client.post('/api/tax/pit/', {'income': '500000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pit'], 50000)

    def test_informal(self):
        response = self.client.post('/api/tax/informal/', {
            'state': 'lagos', 'category': 'micro'
        }, format='json')
        self.assertEqual(response.data['amount'], 8100)

        response = self.client.post('/api/tax/informal/', {
            'state': 'unknown', 'category': 'micro'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['amount'])
        self.assertIn('state IRS', response.data['note'])

    def test_schedule(self):
        response = self.client.get('/api/tax/schedule/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['year'], 2026)
        self.assertEqual(len(response.data['paye_bands']), 6)
        self.assertEqual(response.data['paye_bands'][0]['upper_limit'], 1600000)
        self.assertIsNone(response.data['paye_bands'][-1]['upper_limit'])
        self.assertEqual(response.data['informal_schedule']['lagos']['micro'], 8100)

    def test_paye_huge_gross(self):
        """Test very large salaries return a result instead of an error"""
        response = self.client.post('/api/tax/paye/', {'gross_salary': '1e30'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['gross_salary'], 10 ** 30)
        self.assertEqual(response.data['effective_rate'], '19.75')

    def test_null_lookup_keys(self):
        """Test null categories and states fall back instead of failing validation"""
        response = self.client.post('/api/tax/wht/', {
            'amount': '1e5', 'category': None
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['wht'], 5000)
        self.assertEqual(response.data['rate_percent'], '5.00')

        response = self.client.post('/api/tax/informal/', {
            'state': None, 'category': ['micro']
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['amount'])

    def test_vat_unrecognised_zero_rated_flag(self):
        """Test a non-boolean zero_rated value is treated as standard rated"""
        for flag in ('maybe', None, ['yes'], 2):
            response = self.client.post('/api/tax/vat/', {
                'amount': '100000', 'zero_rated': flag
            }, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['vat'], 7500)

        response = self.client.post('/api/tax/vat/', {
            'amount': '100000', 'zero_rated': 'yes'
        }, format='json')
        self.assertEqual(response.data['vat'], 0)

    def test_get_not_allowed_on_calculations(self):
        response = self.client.get('/api/tax/paye/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
