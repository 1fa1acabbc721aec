"""
Loan Service

A small loan-management service with simple-interest amortization,
EMI and lump-sum payment processing, ledgers and customer overviews.
All financial calculations use Decimal precision.
"""

__version__ = "1.0.0"
