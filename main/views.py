import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from calculator.services.tax import TAX_DISCLAIMER, UnsupportedTaxYear, get_schedule
from .forms import TAX_FORMS

logger = logging.getLogger(__name__)

DEFAULT_TAX_TYPE = 'paye'


def _page_context(tax_type, form, result=None):
    return {
        'tax_type': tax_type,
        'tax_types': [(key, form_class.title) for key, form_class in TAX_FORMS.items()],
        'form': form,
        'result': result,
        'disclaimer': TAX_DISCLAIMER,
    }


def calculator(request):
    """
    Calculator page. Shows the form picked by ?tax_type=, PAYE by default.
    """
    tax_type = request.GET.get('tax_type', DEFAULT_TAX_TYPE)
    if tax_type not in TAX_FORMS:
        tax_type = DEFAULT_TAX_TYPE

    form = TAX_FORMS[tax_type]()
    return render(request, 'main/calculator.html', _page_context(tax_type, form))


@require_http_methods(["POST"])
def calculate(request, tax_type):
    """
    Handle a calculator form submission and render the result
    """
    form_class = TAX_FORMS.get(tax_type)
    if form_class is None:
        raise Http404("Unknown tax type")

    form = form_class(request.POST)
    result = None

    if form.is_valid():
        try:
            schedule = get_schedule()
        except UnsupportedTaxYear as e:
            logger.error(f"Tax schedule is not configured. error {e}")
            messages.error(request, "Tax rates for this year are not available yet.")
        else:
            result = form.calculate(schedule)
            logger.info(f"{tax_type.upper()} calculated from web form")
    else:
        messages.error(
            request,
            "There was an error with your submission. Please check the form and try again."
        )

    return render(request, 'main/calculator.html', _page_context(tax_type, form, result))


def custom_404(request, exception):
    """
    Custom 404 page
    """
    return render(request, 'main/404.html', status=404)
