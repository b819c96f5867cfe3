"""
Ledger app services layer.

Services are pure calculations over caller-supplied snapshots: no database
access, no shared state, safe to call from any thread.
"""

from .exceptions import (
    LedgerServiceError,
    SplitServiceError,
    InvalidInputError,
    AmountMismatchError,
    PercentageMismatchError,
)

from .split_allocation import (
    SplitAllocator,
    SplitMethod,
    MemberShare,
    Equal,
    CustomAmount,
    Percentage,
)

from .settlement import (
    SettlementResolver,
    Transfer,
    DEFAULT_EPSILON,
)

from .balances import (
    Member,
    Expense,
    RecordedSettlement,
    SettlementStatus,
    MemberSummary,
    compute_net_balances,
    normalize_balances,
    summarize_members,
    record_transfer_paid,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'SplitServiceError',
    'InvalidInputError',
    'AmountMismatchError',
    'PercentageMismatchError',

    # Split allocation
    'SplitAllocator',
    'SplitMethod',
    'MemberShare',
    'Equal',
    'CustomAmount',
    'Percentage',

    # Settlement
    'SettlementResolver',
    'Transfer',
    'DEFAULT_EPSILON',

    # Balance aggregation
    'Member',
    'Expense',
    'RecordedSettlement',
    'SettlementStatus',
    'MemberSummary',
    'compute_net_balances',
    'normalize_balances',
    'summarize_members',
    'record_transfer_paid',
]
