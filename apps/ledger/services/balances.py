"""
Net balance aggregation.

Builds the per-member net balance map that the settlement resolver consumes
from a snapshot of a group's members, expenses and recorded settlements.
The caller owns storage; these functions only see plain values.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Hashable, Iterable, Mapping, Optional, Sequence

from .money import from_cents, round2, to_cents, to_decimal
from .split_allocation import MemberShare

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal('0.01')


class SettlementStatus(str, Enum):
    """Lifecycle of a settlement recorded by the caller."""

    PENDING = 'pending'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class Member:
    """
    A group member.

    Non-admin members may hand a deposit to the group admin up front; the
    deposit is credited to the member and debited from the admin.
    """

    member_id: Hashable
    deposit: Decimal = Decimal('0.00')
    is_admin: bool = False


@dataclass(frozen=True)
class Expense:
    """An expense paid by one member and split between several."""

    paid_by: Hashable
    amount: Decimal
    splits: Sequence[MemberShare] = field(default_factory=tuple)


@dataclass(frozen=True)
class RecordedSettlement:
    """A transfer the caller has recorded between two members."""

    from_member_id: Hashable
    to_member_id: Hashable
    amount: Decimal
    status: SettlementStatus = SettlementStatus.COMPLETED


@dataclass(frozen=True)
class MemberSummary:
    """What a member paid, what they consumed, and the difference."""

    member_id: Hashable
    paid: Decimal
    shared: Decimal
    outstanding: Decimal


def normalize_balances(
    balances: Mapping[Hashable, object],
    tolerance=DEFAULT_TOLERANCE,
) -> dict:
    """
    Round balances to cents and zero out anything within ``tolerance``.

    This removes float residue and ``-0.00`` before balances are shown or
    settled. Note that with the default tolerance a one-cent balance is
    treated as settled.
    """
    tolerance = to_decimal(tolerance)
    normalized = {}
    for member_id, balance in balances.items():
        rounded = round2(balance)
        normalized[member_id] = Decimal('0.00') if abs(rounded) <= tolerance else rounded
    return normalized


def compute_net_balances(
    members: Sequence[Member],
    expenses: Iterable[Expense],
    settlements: Iterable[RecordedSettlement] = (),
    tolerance=DEFAULT_TOLERANCE,
) -> dict:
    """
    Aggregate a group snapshot into one net balance per member.

    Steps:
        1. Every member starts at zero.
        2. Deposits: non-admin members are credited their deposit; the
           first admin, if any, is debited the total of those deposits.
        3. Expenses: the payer is credited the amount, each split member is
           debited their share.
        4. Completed settlements: the payer's balance goes up by the amount,
           the receiver's goes down. Any other status is ignored.
        5. Normalize with ``tolerance``.

    Members referenced by an expense or settlement but missing from
    ``members`` still get a balance entry.

    Args:
        members: Group members in display order.
        expenses: Expenses with their persisted splits.
        settlements: Recorded settlements between members.
        tolerance: Balances within this of zero are reported as 0.00.

    Returns:
        dict: Member id to signed ``Decimal`` balance (positive = is owed).
    """
    nets = {member.member_id: 0 for member in members}

    admin_id: Optional[Hashable] = next(
        (member.member_id for member in members if member.is_admin), None
    )
    total_deposits = 0
    for member in members:
        if member.is_admin:
            continue
        deposit = to_cents(member.deposit)
        nets[member.member_id] += deposit
        total_deposits += deposit
    if admin_id is not None and total_deposits != 0:
        nets[admin_id] -= total_deposits

    for expense in expenses:
        nets[expense.paid_by] = nets.get(expense.paid_by, 0) + to_cents(expense.amount)
        for split in expense.splits:
            nets[split.member_id] = nets.get(split.member_id, 0) - to_cents(split.amount)

    for settlement in settlements:
        if settlement.status != SettlementStatus.COMPLETED:
            continue
        amount = to_cents(settlement.amount)
        nets[settlement.from_member_id] = nets.get(settlement.from_member_id, 0) + amount
        nets[settlement.to_member_id] = nets.get(settlement.to_member_id, 0) - amount

    logger.debug("Computed net balances for %d members", len(nets))
    return normalize_balances(
        {member_id: from_cents(cents) for member_id, cents in nets.items()},
        tolerance=tolerance,
    )


def summarize_members(members: Sequence[Member], expenses: Iterable[Expense]) -> list[MemberSummary]:
    """
    Per-member totals of what was paid and what was consumed.

    ``outstanding`` is ``shared - paid``: positive when the member consumed
    more than they paid for.
    """
    paid = {member.member_id: 0 for member in members}
    shared = {member.member_id: 0 for member in members}
    for expense in expenses:
        if expense.paid_by in paid:
            paid[expense.paid_by] += to_cents(expense.amount)
        for split in expense.splits:
            if split.member_id in shared:
                shared[split.member_id] += to_cents(split.amount)

    return [
        MemberSummary(
            member_id=member.member_id,
            paid=from_cents(paid[member.member_id]),
            shared=from_cents(shared[member.member_id]),
            outstanding=from_cents(shared[member.member_id] - paid[member.member_id]),
        )
        for member in members
    ]


def record_transfer_paid(
    balances: Mapping[Hashable, object],
    from_member_id: Hashable,
    to_member_id: Hashable,
    amount,
    tolerance=DEFAULT_TOLERANCE,
) -> dict:
    """
    Apply a just-paid transfer to a balance snapshot.

    The payer's balance rises and the receiver's falls by ``amount``; the
    result is normalized so it can be fed straight back into the resolver.
    """
    updated = {member_id: to_decimal(balance) for member_id, balance in balances.items()}
    amount = to_decimal(amount)
    updated[from_member_id] = updated.get(from_member_id, Decimal(0)) + amount
    updated[to_member_id] = updated.get(to_member_id, Decimal(0)) - amount
    return normalize_balances(updated, tolerance=tolerance)
