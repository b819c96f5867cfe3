"""
Split Allocation Service
=========================

This module turns an expense total into exact per-member shares.

Three allocation methods are supported, modelled as a closed tagged union:

    Equal(member_ids)          - everyone pays the same, give or take a cent
    CustomAmount(amounts)      - explicit amount per member
    Percentage(percentages)    - percentage of the total per member

All arithmetic is done in integer cents, so the shares of an equal or
percentage split always sum to the total exactly. Leftover cents are handed
out in ascending member-id order, which makes every split reproducible.

Classes:
    SplitAllocator: Static methods for each allocation method plus ``split``.
    MemberShare: One member's portion of an expense.

Example:
    Splitting a dinner three ways::

        from decimal import Decimal
        from apps.ledger.services import SplitAllocator, Equal

        shares = SplitAllocator.split(Decimal('100.00'), Equal([3, 1, 2]))
        for share in shares:
            print(f"{share.member_id}: {share.amount}")
        # 1: 33.34
        # 2: 33.33
        # 3: 33.33
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar, Hashable, Mapping, Sequence, Union

from .exceptions import (
    AmountMismatchError,
    InvalidInputError,
    PercentageMismatchError,
)
from .money import CENT, HUNDRED, floor_cents, from_cents, to_cents, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberShare:
    """A member's allocated portion of one expense total."""

    member_id: Hashable
    amount: Decimal


@dataclass(frozen=True)
class Equal:
    """Divide the total evenly between ``member_ids``."""

    member_ids: Sequence[Hashable]
    name: ClassVar[str] = 'equal'


@dataclass(frozen=True)
class CustomAmount:
    """Use the caller's amount for each member; they must add up to the total."""

    amounts: Mapping[Hashable, object] = field(default_factory=dict)
    name: ClassVar[str] = 'custom'


@dataclass(frozen=True)
class Percentage:
    """Allocate a percentage of the total to each member; they must add up to 100."""

    percentages: Mapping[Hashable, object] = field(default_factory=dict)
    name: ClassVar[str] = 'percentage'


SplitMethod = Union[Equal, CustomAmount, Percentage]


def _positive_total_cents(total) -> int:
    total_cents = to_cents(total)
    if total_cents <= 0:
        raise InvalidInputError("Amount must be > 0")
    return total_cents


def _non_negative_values(values: Mapping, label: str) -> dict:
    if not values:
        raise InvalidInputError(f"{label} required")
    converted = {member_id: to_decimal(value) for member_id, value in values.items()}
    negative = [member_id for member_id, value in converted.items() if value < 0]
    if negative:
        raise InvalidInputError(f"{label} must not be negative (members: {sorted(negative)})")
    return converted


class SplitAllocator:
    """
    Stateless calculator for expense splits.

    Each method validates its inputs, works in integer cents, and returns a
    list of ``MemberShare`` ordered by ascending member id. Nothing is
    returned on failure: inputs are rejected with a ``SplitServiceError``
    subclass before any share is computed.

    Methods:
        split_equal: Even split with deterministic leftover cents.
        split_custom: Validate and round caller-provided amounts.
        split_percentage: Percentage split with round-robin leftover cents.
        split: Dispatch on an allocation method value.
    """

    @staticmethod
    def split_equal(total, member_ids: Sequence[Hashable]) -> list[MemberShare]:
        """
        Split ``total`` evenly between ``member_ids``.

        Algorithm:
            1. Base share: ``floor(total / N * 100)`` cents
            2. Leftover: ``round(total * 100) - base * N`` cents
            3. Sort members ascending; the first ``leftover`` get one extra cent

        Args:
            total (Decimal | int | str | float): Expense total, must be > 0.
            member_ids (Sequence): Members to split between, no duplicates.

        Returns:
            list[MemberShare]: One share per member, ascending member id.

        Raises:
            InvalidInputError: If total is not positive, no members are
                given, or a member is listed twice.

        Example:
            100.00 split among 3 members::

                >>> [s.amount for s in SplitAllocator.split_equal(Decimal('100.00'), [1, 2, 3])]
                [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')]

        Note:
            No two shares differ by more than one cent.
        """
        total_cents = _positive_total_cents(total)
        members = list(member_ids)
        if not members:
            raise InvalidInputError("Members required")
        if len(set(members)) != len(members):
            raise InvalidInputError("Each member may appear only once in a split")

        count = len(members)
        base_cents = floor_cents(to_decimal(total) / count)
        remainder_cents = total_cents - base_cents * count

        shares = []
        for index, member_id in enumerate(sorted(members)):
            extra = 1 if index < remainder_cents else 0
            shares.append(MemberShare(member_id, from_cents(base_cents + extra)))

        logger.debug(
            "Equal split of %s among %d members: base %d cents, %d leftover",
            total, count, base_cents, remainder_cents,
        )
        return shares

    @staticmethod
    def split_custom(total, amounts: Mapping[Hashable, object]) -> list[MemberShare]:
        """
        Validate caller-provided amounts against ``total`` and round them.

        Args:
            total (Decimal | int | str | float): Expense total, must be > 0.
            amounts (Mapping): Member id to amount owed.

        Returns:
            list[MemberShare]: Amounts rounded to cents, ascending member id
            (not the mapping's insertion order).

        Rounding happens per amount, so sub-cent inputs can leave the
        returned shares a cent off the total. Callers that need an exact
        reconciliation should pass amounts already in whole cents.

        Raises:
            InvalidInputError: If total is not positive, the mapping is
                empty, or an amount is negative.
            AmountMismatchError: If the amounts differ from the total by a
                cent or more.

        Example:
            >>> SplitAllocator.split_custom(Decimal('100.00'), {2: '60', 1: '40'})
            [MemberShare(member_id=1, amount=Decimal('40.00')), MemberShare(member_id=2, amount=Decimal('60.00'))]
        """
        _positive_total_cents(total)
        values = _non_negative_values(amounts, "Custom amounts")

        provided = sum(values.values(), Decimal(0))
        if abs(provided - to_decimal(total)) >= CENT:
            raise AmountMismatchError(
                f"Custom amounts must sum to total: {provided} != {total}"
            )

        return [
            MemberShare(member_id, from_cents(to_cents(values[member_id])))
            for member_id in sorted(values)
        ]

    @staticmethod
    def split_percentage(total, percentages: Mapping[Hashable, object]) -> list[MemberShare]:
        """
        Allocate ``total`` by percentage per member.

        Algorithm:
            1. For each member in ascending id order:
               ``floor(total * pct / 100 * 100)`` cents
            2. Leftover: ``round(total * 100) - allocated`` cents
            3. Hand out leftover cents one at a time, round-robin, starting
               at the first sorted member

        If the percentages sum slightly above 100 the leftover is negative;
        cents are then taken back in the same round-robin order (skipping
        members already at zero), so the result always reconciles.

        Args:
            total (Decimal | int | str | float): Expense total, must be > 0.
            percentages (Mapping): Member id to percentage of the total.

        Returns:
            list[MemberShare]: One share per member, ascending member id.

        Raises:
            InvalidInputError: If total is not positive, the mapping is
                empty, or a percentage is negative.
            PercentageMismatchError: If percentages differ from 100 by
                0.01 or more.

        Example:
            10.00 split 33.33 / 33.33 / 33.34::

                >>> shares = SplitAllocator.split_percentage(
                ...     Decimal('10.00'), {1: '33.33', 2: '33.33', 3: '33.34'}
                ... )
                >>> [s.amount for s in shares]
                [Decimal('3.34'), Decimal('3.33'), Decimal('3.33')]
        """
        total_cents = _positive_total_cents(total)
        values = _non_negative_values(percentages, "Percentages")

        total_pct = sum(values.values(), Decimal(0))
        if abs(total_pct - HUNDRED) >= CENT:
            raise PercentageMismatchError(f"Percentages must total 100, got {total_pct}")

        total_dec = to_decimal(total)
        members = sorted(values)
        cents = [floor_cents(total_dec * values[member_id] / HUNDRED) for member_id in members]

        remainder_cents = total_cents - sum(cents)
        step = 1 if remainder_cents > 0 else -1
        index = 0
        while remainder_cents != 0:
            slot = index % len(cents)
            index += 1
            if step < 0 and cents[slot] == 0:
                continue
            cents[slot] += step
            remainder_cents -= step

        logger.debug("Percentage split of %s among %d members", total, len(members))
        return [MemberShare(member_id, from_cents(amount)) for member_id, amount in zip(members, cents)]

    @staticmethod
    def split(total, method: SplitMethod) -> list[MemberShare]:
        """
        Split ``total`` using the given allocation method.

        Args:
            total (Decimal | int | str | float): Expense total, must be > 0.
            method (Equal | CustomAmount | Percentage): How to divide it,
                carrying the method's own payload.

        Returns:
            list[MemberShare]: Shares ordered by ascending member id.

        Raises:
            SplitServiceError: Whatever the selected method raises, or
                InvalidInputError for an unknown method value.
        """
        match method:
            case Equal(member_ids=member_ids):
                return SplitAllocator.split_equal(total, member_ids)
            case CustomAmount(amounts=amounts):
                return SplitAllocator.split_custom(total, amounts)
            case Percentage(percentages=percentages):
                return SplitAllocator.split_percentage(total, percentages)
            case _:
                raise InvalidInputError(f"Unknown split method: {method!r}")
