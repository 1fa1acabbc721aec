"""
Error taxonomy for the loan service.

Every error carries the HTTP status it is reported with at the request
boundary.
"""


class LoanServiceError(Exception):
    """Base exception for all loan service errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LoanServiceError):
    """Raised for missing, malformed or out-of-range input."""


class NotFoundError(LoanServiceError):
    """Raised when a loan or customer does not exist."""

    status_code = 404


class AlreadyPaidError(LoanServiceError):
    """Raised when a payment is attempted against a paid-off loan."""


class InvalidAmountError(LoanServiceError):
    """Raised when an EMI payment does not match the current EMI."""


class ExcessPaymentError(LoanServiceError):
    """Raised when a lump sum exceeds the outstanding amount."""


class InvalidPaymentTypeError(LoanServiceError):
    """Raised for payment types other than EMI and LUMP_SUM."""


class NoLoansError(LoanServiceError):
    """Raised when a customer has no loans."""

    status_code = 404


class DivisionUndefinedError(LoanServiceError):
    """Raised when no EMI slots remain to re-amortize a lump sum over."""

    status_code = 500


class StorageError(LoanServiceError):
    """Raised when the storage backend fails."""

    status_code = 500
