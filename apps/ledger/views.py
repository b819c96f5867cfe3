import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .serializers import (
    # Input serializers
    SplitInputSerializer,
    SettleInputSerializer,
    BalancesInputSerializer,
    # Response serializers
    SplitResponseSerializer,
    SettleResponseSerializer,
    BalancesResponseSerializer,
    ErrorSerializer,
)
from .services import (
    LedgerServiceError,
    SettlementResolver,
    SplitAllocator,
    compute_net_balances,
    summarize_members,
)

logger = logging.getLogger(__name__)


def _error_response(exc):
    return Response(
        {'error': str(exc), 'code': exc.code},
        status=status.HTTP_400_BAD_REQUEST
    )


@extend_schema(
    request=SplitInputSerializer,
    responses={
        200: SplitResponseSerializer,
        400: ErrorSerializer,
    },
    description="Split an expense total between members (equal, custom amounts or percentages).",
    tags=['ledger'],
)
@api_view(['POST'])
def split_expense(request):
    """Split an expense into per-member shares - thin HTTP handler."""
    input_serializer = SplitInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    params = input_serializer.validated_data

    try:
        shares = SplitAllocator.split(params['total'], input_serializer.build_method())
    except LedgerServiceError as e:
        logger.info("Rejected %s split: %s", params['method'], e)
        return _error_response(e)

    return Response(SplitResponseSerializer({
        'total': params['total'],
        'method': params['method'],
        'shares': shares,
    }).data)


@extend_schema(
    request=SettleInputSerializer,
    responses={200: SettleResponseSerializer},
    description="Compute the transfers that clear a set of net balances.",
    tags=['ledger'],
)
@api_view(['POST'])
def settle_balances(request):
    """Settle net balances into transfers - thin HTTP handler."""
    input_serializer = SettleInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    epsilon = input_serializer.validated_data.get(
        'epsilon', settings.LEDGER_SETTLEMENT_EPSILON
    )

    transfers = SettlementResolver.settle(input_serializer.build_balances(), epsilon=epsilon)

    return Response(SettleResponseSerializer({'transfers': transfers}).data)


@extend_schema(
    request=BalancesInputSerializer,
    responses={200: BalancesResponseSerializer},
    description="Aggregate a group snapshot into net balances, member summaries and settle-up transfers.",
    tags=['ledger'],
)
@api_view(['POST'])
def group_balances(request):
    """Compute balances and transfers for a group snapshot - thin HTTP handler."""
    input_serializer = BalancesInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    members, expenses, settlements = input_serializer.build_snapshot()

    nets = compute_net_balances(
        members,
        expenses,
        settlements,
        tolerance=settings.LEDGER_BALANCE_TOLERANCE,
    )
    transfers = SettlementResolver.settle(nets, epsilon=settings.LEDGER_SETTLEMENT_EPSILON)

    return Response(BalancesResponseSerializer({
        'balances': [
            {'member_id': member_id, 'balance': balance}
            for member_id, balance in nets.items()
        ],
        'summaries': summarize_members(members, expenses),
        'transfers': transfers,
    }).data)
