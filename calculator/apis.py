import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiParameter
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .serializers import (
    PAYEInputSerializer,
    PAYEResultSerializer,
    VATInputSerializer,
    VATResultSerializer,
    WHTInputSerializer,
    WHTResultSerializer,
    TurnoverInputSerializer,
    CITResultSerializer,
    SMEInputSerializer,
    SMEResultSerializer,
    PITInputSerializer,
    PITResultSerializer,
    InformalTaxInputSerializer,
    InformalTaxResultSerializer,
    TaxScheduleSerializer,
)
from .services.tax import (
    TAX_DISCLAIMER,
    UnsupportedTaxYear,
    NigeriaPAYECalculator,
    calculate_cit,
    calculate_informal_tax,
    calculate_pit,
    calculate_sme,
    calculate_vat,
    calculate_wht,
    get_schedule,
)

# prepare logging handler for this file
logger = logging.getLogger(__name__)


TAX_YEAR_PARAMETER = OpenApiParameter(
    name='tax_year',
    type=OpenApiTypes.INT,
    location=OpenApiParameter.QUERY,
    required=False,
    description='Tax year schedule to apply (default: current configured year)'
)


def _resolve_schedule(request):
    """
    Return (schedule, error_response) for the request's ``tax_year``.
    """
    try:
        return get_schedule(request.query_params.get('tax_year')), None
    except UnsupportedTaxYear as e:
        logger.warning(f"Rejected calculation request. error {e}")
        return None, Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)


def _respond(result_serializer_class, result, schedule):
    result['tax_year'] = schedule.year
    result['disclaimer'] = TAX_DISCLAIMER
    return Response(result_serializer_class(result).data)


@extend_schema(
    summary="Calculate PAYE",
    description=(
        "Calculate annual and monthly PAYE for employment income. Applies CRA, "
        "8% pension on basic salary, rent relief, the ₦800,000 exemption and the "
        "progressive bands. Missing or invalid amounts are treated as 0. "
        "All amounts in Naira (NGN)."
    ),
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=PAYEInputSerializer,
    examples=[
        OpenApiExample(
            'Salaried employee',
            value={
                'gross_salary': '6000000',
                'basic_salary': '3000000',
                'housing_allowance': '1200000',
                'transport_allowance': '600000',
                'nhis_contribution': '50000',
            },
            request_only=True
        )
    ],
    responses={200: PAYEResultSerializer, 400: {'description': 'Unsupported tax year'}}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def paye(request):
    """
    POST /api/tax/paye/?tax_year=2026
    """
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = PAYEInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = NigeriaPAYECalculator(schedule).calculate_paye(serializer.validated_data)
    logger.info(
        f"PAYE calculated for {schedule.year}: annual={result.annual_tax} "
        f"effective_rate={result.effective_rate}%"
    )
    return _respond(PAYEResultSerializer, result.as_dict(), schedule)


@extend_schema(
    summary="Calculate VAT",
    description="VAT on an amount. Zero-rated supplies attract no VAT. Rate defaults to 7.5%.",
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=VATInputSerializer,
    examples=[
        OpenApiExample(
            'Standard rated supply',
            value={'amount': '100000', 'rate': '7.5', 'zero_rated': False},
            request_only=True
        )
    ],
    responses={200: VATResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def vat(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = VATInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = calculate_vat(
        data.get('amount'), data.get('rate'), data.get('zero_rated', False),
        schedule=schedule
    )
    logger.info(f"VAT calculated: {result['vat']}")
    return _respond(VATResultSerializer, result, schedule)


@extend_schema(
    summary="Calculate withholding tax",
    description=(
        "WHT by payment category: contract and consultancy 5%; rent, dividend "
        "and interest 10%. Unknown categories use 5%."
    ),
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=WHTInputSerializer,
    examples=[
        OpenApiExample(
            'Rent payment',
            value={'amount': '2000000', 'category': 'rent'},
            request_only=True
        )
    ],
    responses={200: WHTResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def wht(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = WHTInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = calculate_wht(data.get('amount'), data.get('category'), schedule=schedule)
    logger.info(f"WHT calculated: {result['wht']} at {result['rate_percent']}%")
    return _respond(WHTResultSerializer, result, schedule)


@extend_schema(
    summary="Calculate companies income tax",
    description="CIT by turnover: up to ₦25m 0%, up to ₦100m 20%, above that 30%.",
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=TurnoverInputSerializer,
    responses={200: CITResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def cit(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = TurnoverInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = calculate_cit(serializer.validated_data.get('turnover'), schedule=schedule)
    logger.info(f"CIT calculated: {result['cit']}")
    return _respond(CITResultSerializer, result, schedule)


@extend_schema(
    summary="Calculate personal income tax (flat)",
    description="Simplified PIT at a flat 10% of declared income.",
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=PITInputSerializer,
    responses={200: PITResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def pit(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = PITInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = calculate_pit(serializer.validated_data.get('income'), schedule=schedule)
    logger.info(f"PIT calculated: {result['pit']}")
    return _respond(PITResultSerializer, result, schedule)


@extend_schema(
    summary="Estimate SME companies income tax",
    description="Same turnover tiers as CIT, with a label for the tier applied.",
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=SMEInputSerializer,
    responses={200: SMEResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def sme(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = SMEInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = calculate_sme(data.get('turnover'), data.get('assets'), schedule=schedule)
    logger.info(f"SME CIT calculated: {result['cit']} ({result['note']})")
    return _respond(SMEResultSerializer, result, schedule)


@extend_schema(
    summary="Informal sector presumptive tax",
    description=(
        "Annual presumptive tax by state and business size. States without a "
        "schedule return amount=null with a note."
    ),
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    request=InformalTaxInputSerializer,
    examples=[
        OpenApiExample(
            'Lagos micro business',
            value={'state': 'lagos', 'category': 'micro'},
            request_only=True
        )
    ],
    responses={200: InformalTaxResultSerializer}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def informal(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error

    serializer = InformalTaxInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = calculate_informal_tax(data.get('state'), data.get('category'), schedule=schedule)
    logger.info(f"Informal tax looked up for '{data.get('state')}': {result['amount']}")
    return _respond(InformalTaxResultSerializer, result, schedule)


@extend_schema(
    summary="Get tax schedule",
    description="Return the rates, reliefs and PAYE bands for a tax year.",
    tags=["Tax"],
    parameters=[TAX_YEAR_PARAMETER],
    responses={200: TaxScheduleSerializer, 400: {'description': 'Unsupported tax year'}}
)
@api_view(['GET'])
@permission_classes([AllowAny])
def schedule_detail(request):
    schedule, error = _resolve_schedule(request)
    if error:
        return error
    return Response(TaxScheduleSerializer(schedule).data)
