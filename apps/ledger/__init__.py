"""
Ledger App - Group Expense Splitting and Settlement

This app holds the calculation core of the split book: turning an expense
total into exact per-member shares, and turning per-member net balances into
a short list of "who pays whom" transfers.

Key Features:
- Cent-precise equal, custom-amount and percentage splits
- Greedy largest-first debt settlement
- Net balance aggregation from expenses, deposits and recorded settlements
- Stateless JSON endpoints for the above

Architecture:
- Services: SplitAllocator, SettlementResolver, balance aggregation functions
- Serializers: input validation and response formatting
- Views: thin DRF function views, nothing is persisted
- Exceptions: domain exception hierarchy with stable error codes
"""

__version__ = '1.0.0'
