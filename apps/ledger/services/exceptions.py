"""
Domain exceptions for the ledger app.

These exceptions represent rejected calculation inputs. They are raised by
the services layer before any result is produced and are translated into
HTTP 400 responses by the views.

Exception Hierarchy:
    LedgerServiceError (base)
    └── SplitServiceError
        ├── InvalidInputError
        ├── AmountMismatchError
        └── PercentageMismatchError

The settlement resolver and balance aggregation never raise: they are
defined for every input.
"""


class LedgerServiceError(Exception):
    """
    Base exception for all ledger service errors.

    Every subclass carries a stable ``code`` so callers can branch on the
    failure kind without parsing messages:

        try:
            shares = SplitAllocator.split(total, method)
        except LedgerServiceError as e:
            return Response({'error': str(e), 'code': e.code}, status=400)
    """

    code = 'ledger_error'


class SplitServiceError(LedgerServiceError):
    """Base exception for split allocation errors."""

    code = 'split_error'


class InvalidInputError(SplitServiceError):
    """
    Raised when a split request is malformed.

    Covers a non-positive total, an empty member/amount/percentage set,
    duplicate members and negative amounts or percentages.

    Example:
        raise InvalidInputError("Amount must be > 0")
    """

    code = 'invalid_input'


class AmountMismatchError(SplitServiceError):
    """
    Raised when custom amounts don't add up to the expense total.

    Example:
        raise AmountMismatchError("Custom amounts must sum to total")
    """

    code = 'amount_mismatch'


class PercentageMismatchError(SplitServiceError):
    """
    Raised when percentages don't add up to 100.

    Example:
        raise PercentageMismatchError("Percentages must total 100")
    """

    code = 'percentage_mismatch'
