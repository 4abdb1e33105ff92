from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from .forms import InformalTaxForm, PAYEForm, VATForm
from .templatetags.naira import format_naira


class NairaFormatTest(SimpleTestCase):
    """Test the naira display filter"""

    def test_whole_amounts(self):
        self.assertEqual(format_naira(1234567), '₦1,234,567')
        self.assertEqual(format_naira(0), '₦0')
        self.assertEqual(format_naira(None), '₦0')

    def test_fractional_amounts(self):
        self.assertEqual(format_naira(Decimal('1234.5')), '₦1,234.50')


class CalculatorFormTest(SimpleTestCase):
    """Test calculator forms"""

    def test_paye_form_blank_and_invalid_amounts(self):
        form = PAYEForm({'gross_salary': 'abc', 'basic_salary': ''})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data['gross_salary'], Decimal('0'))
        self.assertEqual(form.cleaned_data['basic_salary'], Decimal('0'))

    def test_paye_form_calculate(self):
        form = PAYEForm({'gross_salary': '1000000', 'basic_salary': '500000'})
        self.assertTrue(form.is_valid())
        result = form.calculate()
        self.assertEqual(result['headline'], ('Annual PAYE', 0))
        rows = {label: value for label, value, kind in result['rows']}
        self.assertEqual(rows['CRA Applied'], 210000)
        self.assertEqual(rows['Pension (8% of basic)'], 40000)

    def test_vat_form_zero_rated(self):
        form = VATForm({'amount': '100000', 'rate': '7.5', 'zero_rated': 'yes'})
        self.assertTrue(form.is_valid())
        result = form.calculate()
        self.assertEqual(result['headline'], ('VAT', 0))
        self.assertEqual(result['note'], 'Zero-rated (no VAT charged)')

    def test_informal_form_without_schedule(self):
        form = InformalTaxForm({'state': 'kano', 'category': 'small'})
        self.assertTrue(form.is_valid())
        result = form.calculate()
        self.assertIsNone(result['headline'])
        self.assertIn('No presumptive schedule', result['note'])


class CalculatorViewTest(TestCase):
    """Test the calculator pages"""

    def test_default_form_is_paye(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['tax_type'], 'paye')
        self.assertIsInstance(response.context['form'], PAYEForm)
        self.assertContains(response, 'Legal Notice')

    def test_form_switch(self):
        response = self.client.get('/?tax_type=vat')
        self.assertIsInstance(response.context['form'], VATForm)

    def test_unknown_form_falls_back_to_paye(self):
        response = self.client.get('/?tax_type=bogus')
        self.assertEqual(response.context['tax_type'], 'paye')

    def test_calculate_paye(self):
        response = self.client.post('/calculate/paye/', {
            'gross_salary': '6000000',
            'basic_salary': '3000000',
            'housing_allowance': '1200000',
            'nhis_contribution': '50000',
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['result']['headline'], ('Annual PAYE', 615900))
        self.assertContains(response, '₦615,900')
        self.assertContains(response, '10.27%')

    def test_calculate_informal_unknown_state(self):
        response = self.client.post('/calculate/informal/', {'state': 'rivers', 'category': 'micro'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'No presumptive schedule for this state')

    def test_calculate_unknown_tax_type(self):
        response = self.client.post('/calculate/stamp-duty/', {})
        self.assertEqual(response.status_code, 404)

    def test_calculate_requires_post(self):
        response = self.client.get('/calculate/paye/')
        self.assertEqual(response.status_code, 405)
