"""
Service tests for split allocation.

Tests cover:
- Cent-exact reconciliation of equal and percentage splits
- Deterministic leftover-cent placement
- Custom amount validation
- Input rejection with domain errors
"""

import pytest
from decimal import Decimal

from apps.ledger.services import (
    SplitAllocator,
    MemberShare,
    Equal,
    CustomAmount,
    Percentage,
)
from apps.ledger.services.exceptions import (
    InvalidInputError,
    AmountMismatchError,
    PercentageMismatchError,
    SplitServiceError,
)


def amounts(shares):
    return [share.amount for share in shares]


def total_of(shares):
    return sum(amounts(shares), Decimal('0'))


# =============================================================================
# Equal Split Tests
# =============================================================================

class TestSplitEqual:
    """Tests for SplitAllocator.split_equal."""

    def test_three_way_split_gives_extra_cent_to_lowest_id(self):
        """100.00 among 3: the lowest member id gets the leftover cent."""
        shares = SplitAllocator.split_equal(Decimal('100.00'), [3, 1, 2])

        assert shares == [
            MemberShare(1, Decimal('33.34')),
            MemberShare(2, Decimal('33.33')),
            MemberShare(3, Decimal('33.33')),
        ]

    def test_even_division_has_no_leftover(self):
        shares = SplitAllocator.split_equal(Decimal('90.00'), [1, 2, 3])

        assert amounts(shares) == [Decimal('30.00')] * 3

    def test_multiple_leftover_cents_go_to_first_sorted_members(self):
        """0.05 among 3: base 0.01, two leftover cents for ids 1 and 2."""
        shares = SplitAllocator.split_equal(Decimal('0.05'), [2, 3, 1])

        assert amounts(shares) == [Decimal('0.02'), Decimal('0.02'), Decimal('0.01')]

    def test_single_member_gets_everything(self):
        shares = SplitAllocator.split_equal(Decimal('12.34'), [7])

        assert shares == [MemberShare(7, Decimal('12.34'))]

    def test_reconciles_to_the_cent(self):
        """Shares always add back up to the total."""
        for total in ['0.01', '0.07', '1.00', '10.00', '99.99', '100.00', '1234.56']:
            for count in range(1, 12):
                shares = SplitAllocator.split_equal(Decimal(total), list(range(count)))

                assert total_of(shares) == Decimal(total), (total, count)

    def test_shares_differ_by_at_most_one_cent(self):
        shares = SplitAllocator.split_equal(Decimal('100.00'), list(range(7)))

        assert max(amounts(shares)) - min(amounts(shares)) <= Decimal('0.01')

    def test_every_member_appears_exactly_once(self):
        members = [10, 4, 8, 1]
        shares = SplitAllocator.split_equal(Decimal('50.00'), members)

        assert sorted(share.member_id for share in shares) == sorted(members)

    def test_is_deterministic(self):
        first = SplitAllocator.split_equal(Decimal('100.00'), [5, 3, 9])
        second = SplitAllocator.split_equal(Decimal('100.00'), [9, 5, 3])

        assert first == second

    def test_accepts_float_and_string_totals(self):
        """Floats are read through their shortest representation."""
        from_float = SplitAllocator.split_equal(10.1, [1, 2])
        from_string = SplitAllocator.split_equal('10.10', [1, 2])

        assert from_float == from_string
        assert amounts(from_float) == [Decimal('5.05'), Decimal('5.05')]

    def test_string_member_ids_sort_naturally(self):
        shares = SplitAllocator.split_equal(Decimal('0.02'), ['carol', 'alice', 'bob'])

        assert [s.member_id for s in shares] == ['alice', 'bob', 'carol']
        assert amounts(shares) == [Decimal('0.01'), Decimal('0.01'), Decimal('0.00')]

    @pytest.mark.parametrize('total', [Decimal('0'), Decimal('-5.00'), Decimal('0.001')])
    def test_non_positive_total_rejected(self, total):
        """Totals that don't round to at least one cent are invalid."""
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_equal(total, [1, 2])

    def test_empty_members_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_equal(Decimal('10.00'), [])

    def test_duplicate_members_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_equal(Decimal('10.00'), [1, 2, 1])


# =============================================================================
# Custom Amount Split Tests
# =============================================================================

class TestSplitCustom:
    """Tests for SplitAllocator.split_custom."""

    def test_matching_amounts_accepted(self):
        shares = SplitAllocator.split_custom(
            Decimal('100.00'), {1: Decimal('40'), 2: Decimal('60')}
        )

        assert shares == [
            MemberShare(1, Decimal('40.00')),
            MemberShare(2, Decimal('60.00')),
        ]

    def test_amounts_one_cent_short_rejected(self):
        with pytest.raises(AmountMismatchError):
            SplitAllocator.split_custom(
                Decimal('100.00'), {1: Decimal('40'), 2: Decimal('59.99')}
            )

    def test_amounts_over_total_rejected(self):
        with pytest.raises(AmountMismatchError):
            SplitAllocator.split_custom(
                Decimal('100.00'), {1: Decimal('40'), 2: Decimal('61')}
            )

    def test_output_ordered_by_member_id_not_insertion(self):
        shares = SplitAllocator.split_custom(
            Decimal('10.00'), {3: '5.00', 1: '2.00', 2: '3.00'}
        )

        assert [s.member_id for s in shares] == [1, 2, 3]

    def test_sub_cent_amounts_rounded_half_up(self):
        shares = SplitAllocator.split_custom(
            Decimal('100.00'), {1: Decimal('40'), 2: Decimal('59.995')}
        )

        assert amounts(shares) == [Decimal('40.00'), Decimal('60.00')]

    def test_rounded_amounts_may_miss_total_by_a_cent(self):
        """Within a cent in total; each amount is rounded on its own."""
        shares = SplitAllocator.split_custom(
            Decimal('100.00'), {1: Decimal('50.004'), 2: Decimal('49.99')}
        )

        assert amounts(shares) == [Decimal('50.00'), Decimal('49.99')]

    def test_sub_cent_shortfall_rounds_down(self):
        shares = SplitAllocator.split_custom(
            Decimal('100.00'), {1: Decimal('40'), 2: Decimal('59.991')}
        )

        assert amounts(shares) == [Decimal('40.00'), Decimal('59.99')]

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_custom(
                Decimal('100.00'), {1: Decimal('-10'), 2: Decimal('110')}
            )

    def test_empty_amounts_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_custom(Decimal('100.00'), {})

    def test_zero_total_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_custom(Decimal('0'), {1: Decimal('0')})


# =============================================================================
# Percentage Split Tests
# =============================================================================

class TestSplitPercentage:
    """Tests for SplitAllocator.split_percentage."""

    def test_thirds_of_one_hundred(self):
        shares = SplitAllocator.split_percentage(
            Decimal('100.00'),
            {1: Decimal('33.33'), 2: Decimal('33.33'), 3: Decimal('33.34')},
        )

        assert amounts(shares) == [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')]
        assert total_of(shares) == Decimal('100.00')

    def test_leftover_cent_goes_to_first_sorted_member(self):
        """10.00 at 33.33/33.33/33.34 floors to 9.99; member 1 gets the cent."""
        shares = SplitAllocator.split_percentage(
            Decimal('10.00'),
            {3: Decimal('33.34'), 2: Decimal('33.33'), 1: Decimal('33.33')},
        )

        assert shares == [
            MemberShare(1, Decimal('3.34')),
            MemberShare(2, Decimal('3.33')),
            MemberShare(3, Decimal('3.33')),
        ]

    def test_leftover_cents_round_robin(self):
        """0.03 at 25% each floors to zero; three cents go to ids 1, 2, 3."""
        shares = SplitAllocator.split_percentage(
            Decimal('0.03'), {4: 25, 3: 25, 2: 25, 1: 25}
        )

        assert amounts(shares) == [
            Decimal('0.01'), Decimal('0.01'), Decimal('0.01'), Decimal('0.00'),
        ]

    def test_percentages_slightly_over_hundred_still_reconcile(self):
        """Excess cents are taken back round-robin from the first member."""
        shares = SplitAllocator.split_percentage(
            Decimal('1000.00'), {1: Decimal('50.009'), 2: Decimal('50')}
        )

        assert amounts(shares) == [Decimal('500.04'), Decimal('499.96')]
        assert total_of(shares) == Decimal('1000.00')

    def test_reconciles_for_uneven_percentages(self):
        percentages = {1: '12.5', 2: '37.5', 3: '16.67', 4: '33.33'}
        for total in ['0.99', '1.00', '17.23', '999.99', '1000000.01']:
            shares = SplitAllocator.split_percentage(Decimal(total), percentages)

            assert total_of(shares) == Decimal(total), total

    def test_is_deterministic(self):
        percentages = {2: Decimal('60'), 1: Decimal('40')}
        first = SplitAllocator.split_percentage(Decimal('33.33'), percentages)
        second = SplitAllocator.split_percentage(Decimal('33.33'), dict(reversed(percentages.items())))

        assert first == second

    def test_percentages_short_of_hundred_rejected(self):
        with pytest.raises(PercentageMismatchError):
            SplitAllocator.split_percentage(
                Decimal('100.00'), {1: Decimal('50'), 2: Decimal('49.99')}
            )

    def test_percentages_within_tolerance_accepted(self):
        shares = SplitAllocator.split_percentage(
            Decimal('100.00'), {1: Decimal('50'), 2: Decimal('49.995')}
        )

        assert amounts(shares) == [Decimal('50.01'), Decimal('49.99')]

    def test_negative_percentage_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_percentage(
                Decimal('100.00'), {1: Decimal('110'), 2: Decimal('-10')}
            )

    def test_empty_percentages_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split_percentage(Decimal('100.00'), {})


# =============================================================================
# Dispatch Tests
# =============================================================================

class TestSplitDispatch:
    """Tests for SplitAllocator.split over the method union."""

    def test_equal_method(self):
        assert SplitAllocator.split(Decimal('10.00'), Equal([2, 1])) == \
            SplitAllocator.split_equal(Decimal('10.00'), [1, 2])

    def test_custom_method(self):
        shares = SplitAllocator.split(Decimal('10.00'), CustomAmount({1: '7', 2: '3'}))

        assert amounts(shares) == [Decimal('7.00'), Decimal('3.00')]

    def test_percentage_method(self):
        shares = SplitAllocator.split(Decimal('10.00'), Percentage({1: 70, 2: 30}))

        assert amounts(shares) == [Decimal('7.00'), Decimal('3.00')]

    def test_errors_propagate_from_method(self):
        with pytest.raises(PercentageMismatchError):
            SplitAllocator.split(Decimal('10.00'), Percentage({1: 70}))

    def test_unknown_method_rejected(self):
        with pytest.raises(InvalidInputError):
            SplitAllocator.split(Decimal('10.00'), 'equal')

    def test_all_split_errors_share_a_base(self):
        for exc in (InvalidInputError, AmountMismatchError, PercentageMismatchError):
            assert issubclass(exc, SplitServiceError)
