"""
Settlement Service
===================

This module turns per-member net balances into a list of transfers that
clears them ("settle up").

Balances follow the ledger's sign convention: positive means the member is
owed money (creditor), negative means the member owes money (debtor).

The resolver is a deterministic greedy heuristic, not an optimal solver.
Finding the minimum number of transfers is NP-hard in general; matching the
largest creditor against the largest debtor is good in practice and fully
reproducible, but can use more transfers than a hand-picked plan.

Classes:
    SettlementResolver: Greedy largest-first matching.
    Transfer: A directed payment from one member to another.

Example:
    Settling a three-person trip::

        from decimal import Decimal
        from apps.ledger.services import SettlementResolver

        transfers = SettlementResolver.settle({
            1: Decimal('30.00'),
            2: Decimal('-10.00'),
            3: Decimal('-20.00'),
        })
        for t in transfers:
            print(f"{t.from_member_id} pays {t.to_member_id} {t.amount}")
        # 3 pays 1 20.00
        # 2 pays 1 10.00
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Hashable, Mapping

from .money import from_cents, to_cents, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = Decimal('0.01')


@dataclass(frozen=True)
class Transfer:
    """Payment of ``amount`` from ``from_member_id`` to ``to_member_id``."""

    from_member_id: Hashable
    to_member_id: Hashable
    amount: Decimal


class SettlementResolver:
    """
    Stateless greedy settlement calculator.

    Methods:
        settle: Compute transfers for a net balance snapshot.

    Note:
        The resolver assumes the balances sum to (approximately) zero and
        does not check it. When they don't, one side runs out first and the
        other side's leftover is left unsettled, with no transfer and no
        error. A warning is logged so the caller's aggregation can be fixed.
    """

    @staticmethod
    def settle(net_balances: Mapping[Hashable, object], epsilon=DEFAULT_EPSILON) -> list[Transfer]:
        """
        Compute transfers that bring every balance to zero.

        Algorithm:
            1. Creditors: ``balance > epsilon``; debtors: ``balance < -epsilon``
               (stored as a positive amount owed). Both rounded to cents.
            2. Sort both descending by amount. The sort is stable, so equal
               amounts keep the input mapping's iteration order.
            3. Pay ``min(creditor_left, debtor_left)`` from the largest
               debtor to the largest creditor; advance past whoever is left
               with ``<= epsilon``. Repeat until one side is exhausted.

        Args:
            net_balances (Mapping): Member id to signed net balance.
            epsilon (Decimal, optional): Tolerance below which a balance or
                remainder counts as settled. Defaults to 0.01.

        Returns:
            list[Transfer]: Transfers in the order they were matched. Empty
            if there is nothing to settle.

        Example:
            >>> SettlementResolver.settle({})
            []
            >>> SettlementResolver.settle({1: Decimal('0.005')})
            []
        """
        epsilon = to_decimal(epsilon)
        epsilon_cents = epsilon * 100

        creditors = []
        debtors = []
        for member_id, balance in net_balances.items():
            balance = to_decimal(balance)
            if balance > epsilon:
                creditors.append([member_id, to_cents(balance)])
            elif balance < -epsilon:
                debtors.append([member_id, to_cents(-balance)])

        # Largest first to reduce the number of transfers
        creditors.sort(key=lambda entry: entry[1], reverse=True)
        debtors.sort(key=lambda entry: entry[1], reverse=True)

        transfers = []
        ci = 0
        di = 0
        while ci < len(creditors) and di < len(debtors):
            creditor = creditors[ci]
            debtor = debtors[di]

            pay = min(creditor[1], debtor[1])
            if pay > 0:
                transfers.append(Transfer(
                    from_member_id=debtor[0],
                    to_member_id=creditor[0],
                    amount=from_cents(pay),
                ))

            creditor[1] -= pay
            debtor[1] -= pay
            if creditor[1] <= 0 or creditor[1] <= epsilon_cents:
                ci += 1
            if debtor[1] <= 0 or debtor[1] <= epsilon_cents:
                di += 1

        unsettled = sum(c[1] for c in creditors[ci:]) + sum(d[1] for d in debtors[di:])
        if unsettled > epsilon_cents:
            logger.warning(
                "Balances do not net to zero; %s left unsettled", from_cents(unsettled)
            )

        logger.debug(
            "Settled %d creditors and %d debtors with %d transfers",
            len(creditors), len(debtors), len(transfers),
        )
        return transfers
