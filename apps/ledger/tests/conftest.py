import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from apps.ledger.services import (
    Expense,
    Member,
    MemberShare,
    RecordedSettlement,
    SettlementStatus,
)


@pytest.fixture
def api_client():
    """Return an API client."""
    return APIClient()


# =============================================================================
# Group snapshot
# =============================================================================

@pytest.fixture
def trip_members():
    """Three members, the first one holding the group kitty."""
    return [
        Member(member_id=1, is_admin=True),
        Member(member_id=2),
        Member(member_id=3),
    ]


@pytest.fixture
def dinner_expense():
    """90.00 paid by member 1, split equally between all three."""
    return Expense(
        paid_by=1,
        amount=Decimal('90.00'),
        splits=(
            MemberShare(1, Decimal('30.00')),
            MemberShare(2, Decimal('30.00')),
            MemberShare(3, Decimal('30.00')),
        ),
    )


@pytest.fixture
def taxi_expense():
    """25.00 paid by member 2, shared by members 2 and 3."""
    return Expense(
        paid_by=2,
        amount=Decimal('25.00'),
        splits=(
            MemberShare(2, Decimal('12.50')),
            MemberShare(3, Decimal('12.50')),
        ),
    )


@pytest.fixture
def completed_settlement():
    """Member 3 paid member 1 back 20.00."""
    return RecordedSettlement(
        from_member_id=3,
        to_member_id=1,
        amount=Decimal('20.00'),
        status=SettlementStatus.COMPLETED,
    )


@pytest.fixture
def pending_settlement():
    """Member 2 promised member 1 30.00 but hasn't paid yet."""
    return RecordedSettlement(
        from_member_id=2,
        to_member_id=1,
        amount=Decimal('30.00'),
        status=SettlementStatus.PENDING,
    )


# =============================================================================
# Request bodies
# =============================================================================

@pytest.fixture
def trip_snapshot_payload():
    """Balances endpoint body mirroring the trip fixtures."""
    return {
        'members': [
            {'member_id': 1, 'is_admin': True},
            {'member_id': 2},
            {'member_id': 3},
        ],
        'expenses': [
            {
                'paid_by': 1,
                'amount': '90.00',
                'splits': [
                    {'member_id': 1, 'amount': '30.00'},
                    {'member_id': 2, 'amount': '30.00'},
                    {'member_id': 3, 'amount': '30.00'},
                ],
            },
        ],
        'settlements': [
            {'from_member_id': 3, 'to_member_id': 1, 'amount': '20.00', 'status': 'completed'},
            {'from_member_id': 2, 'to_member_id': 1, 'amount': '30.00', 'status': 'pending'},
        ],
    }
