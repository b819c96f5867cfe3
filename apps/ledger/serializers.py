"""
Serializers for ledger app.

This module contains:
1. Input serializers - Request body validation, building service inputs
2. Response serializers - API documentation and output formatting

Input Serializers:
    SplitInputSerializer - Expense total plus allocation method payload
    SettleInputSerializer - Net balances and optional epsilon
    BalancesInputSerializer - Group snapshot (members, expenses, settlements)

Response Serializers:
    SplitResponseSerializer - Per-member shares
    SettleResponseSerializer - Transfers
    BalancesResponseSerializer - Balances, member summaries and transfers
    ErrorSerializer - Domain error body

Amounts are rendered as strings with two decimal places.
"""

from rest_framework import serializers

from .services import (
    CustomAmount,
    Equal,
    Expense,
    Member,
    MemberShare,
    Percentage,
    RecordedSettlement,
    SettlementStatus,
)


def _reject_duplicates(entries, key='member_id'):
    seen = set()
    for entry in entries:
        if entry[key] in seen:
            raise serializers.ValidationError(f'Member {entry[key]} is listed more than once')
        seen.add(entry[key])
    return entries


# =============================================================================
# Input Serializers
# =============================================================================

class MemberAmountInputSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=4)


class MemberPercentageInputSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    percentage = serializers.DecimalField(max_digits=9, decimal_places=4)


class SplitInputSerializer(serializers.Serializer):
    """
    Validate a split request.

    Used by: split_expense

    Body:
        total (decimal): Expense total
        method (str): 'equal', 'custom' or 'percentage'
        member_ids (list[int]): Required for 'equal'
        amounts (list): ``{member_id, amount}`` entries, required for 'custom'
        percentages (list): ``{member_id, percentage}`` entries, required for
            'percentage'

    Note:
        Business rules (positive total, amounts adding up, percentages
        totalling 100) are left to the services so they surface with their
        domain error codes.
    """

    METHOD_PAYLOAD = {
        Equal.name: 'member_ids',
        CustomAmount.name: 'amounts',
        Percentage.name: 'percentages',
    }

    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    method = serializers.ChoiceField(
        choices=tuple(METHOD_PAYLOAD),
        default=Equal.name,
        help_text="Allocation method: 'equal', 'custom' or 'percentage'"
    )
    member_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    amounts = MemberAmountInputSerializer(many=True, required=False)
    percentages = MemberPercentageInputSerializer(many=True, required=False)

    def validate(self, attrs):
        """Require the payload that belongs to the chosen method."""
        payload_field = self.METHOD_PAYLOAD[attrs['method']]
        if payload_field not in attrs:
            raise serializers.ValidationError({
                payload_field: f"This field is required for {attrs['method']} splits."
            })

        return attrs

    def validate_amounts(self, value):
        return _reject_duplicates(value)

    def validate_percentages(self, value):
        return _reject_duplicates(value)

    def build_method(self):
        """Turn validated data into an allocation method value."""
        data = self.validated_data
        method = data['method']
        if method == Equal.name:
            return Equal(tuple(data['member_ids']))
        if method == CustomAmount.name:
            return CustomAmount({e['member_id']: e['amount'] for e in data['amounts']})
        return Percentage({e['member_id']: e['percentage'] for e in data['percentages']})


class MemberBalanceInputSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    balance = serializers.DecimalField(max_digits=14, decimal_places=4)


class SettleInputSerializer(serializers.Serializer):
    """
    Validate a settle-up request.

    Used by: settle_balances

    Body:
        balances (list): ``{member_id, balance}`` entries; positive balance
            means the member is owed money
        epsilon (decimal, optional): Settled-within tolerance, defaults to
            the ``LEDGER_SETTLEMENT_EPSILON`` setting

    Note:
        Entry order matters: it is the tie-break between equal balances.
    """

    balances = MemberBalanceInputSerializer(many=True)
    epsilon = serializers.DecimalField(
        max_digits=8,
        decimal_places=4,
        min_value=0,
        required=False,
    )

    def validate_balances(self, value):
        return _reject_duplicates(value)

    def build_balances(self):
        """Balance mapping in request order."""
        return {e['member_id']: e['balance'] for e in self.validated_data['balances']}


class MemberInputSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    deposit = serializers.DecimalField(max_digits=14, decimal_places=2, default=0)
    is_admin = serializers.BooleanField(default=False)


class ExpenseSplitInputSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class ExpenseInputSerializer(serializers.Serializer):
    paid_by = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    splits = ExpenseSplitInputSerializer(many=True)


class SettlementInputSerializer(serializers.Serializer):
    from_member_id = serializers.IntegerField()
    to_member_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    status = serializers.ChoiceField(
        choices=[s.value for s in SettlementStatus],
        default=SettlementStatus.COMPLETED.value,
    )


class BalancesInputSerializer(serializers.Serializer):
    """
    Validate a group snapshot for balance aggregation.

    Used by: group_balances

    Body:
        members (list): ``{member_id, deposit, is_admin}`` entries
        expenses (list): ``{paid_by, amount, splits[{member_id, amount}]}``
        settlements (list, optional): recorded transfers with a status
    """

    members = MemberInputSerializer(many=True)
    expenses = ExpenseInputSerializer(many=True, required=False, default=list)
    settlements = SettlementInputSerializer(many=True, required=False, default=list)

    def validate_members(self, value):
        return _reject_duplicates(value)

    def build_snapshot(self):
        """Return ``(members, expenses, settlements)`` as service values."""
        data = self.validated_data
        members = [Member(**m) for m in data['members']]
        expenses = [
            Expense(
                paid_by=e['paid_by'],
                amount=e['amount'],
                splits=tuple(MemberShare(s['member_id'], s['amount']) for s in e['splits']),
            )
            for e in data['expenses']
        ]
        settlements = [
            RecordedSettlement(
                from_member_id=s['from_member_id'],
                to_member_id=s['to_member_id'],
                amount=s['amount'],
                status=SettlementStatus(s['status']),
            )
            for s in data['settlements']
        ]
        return members, expenses, settlements


# =============================================================================
# Response Serializers
# =============================================================================

class MemberShareSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class SplitResponseSerializer(serializers.Serializer):
    """Shares for one expense, ascending member id."""
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    method = serializers.CharField()
    shares = MemberShareSerializer(many=True)


class TransferSerializer(serializers.Serializer):
    from_member_id = serializers.IntegerField()
    to_member_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class SettleResponseSerializer(serializers.Serializer):
    """Transfers that clear the submitted balances."""
    transfers = TransferSerializer(many=True)


class MemberBalanceSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class MemberSummarySerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    shared = serializers.DecimalField(max_digits=14, decimal_places=2)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)


class BalancesResponseSerializer(serializers.Serializer):
    """Net balances, paid/shared summaries and the resulting transfers."""
    balances = MemberBalanceSerializer(many=True)
    summaries = MemberSummarySerializer(many=True)
    transfers = TransferSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    """Domain error response serializer."""
    error = serializers.CharField()
    code = serializers.CharField()
