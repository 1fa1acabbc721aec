"""
Amortization Module

Simple-interest loan arithmetic. Values are kept at full Decimal precision;
rounding to cents happens only where amounts are presented.
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from dataclasses import dataclass

from .exceptions import ValidationError


MONTHS_PER_YEAR = 12
CENT = Decimal('0.01')
# Amounts stay exact to the cent when presented as JSON floats
MAX_TOTAL_PAYABLE = Decimal('10000000000000')


@dataclass(frozen=True)
class LoanQuote:
    """Amounts fixed at loan creation"""
    total_amount_payable: Decimal
    monthly_emi: Decimal


def round_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents for presentation"""
    amount = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def scheduled_emi_count(period_years: int) -> int:
    """Number of monthly installments over the loan period"""
    return period_years * MONTHS_PER_YEAR


def total_amount_payable(principal: Decimal, period_years: int, annual_rate_percent: Decimal) -> Decimal:
    """
    Principal plus simple interest over the full term:
    I = P * N * (R / 100), A = P + I
    """
    total_interest = principal * period_years * (annual_rate_percent / Decimal('100'))
    return principal + total_interest


def monthly_emi_for(total_amount: Decimal, period_years: int) -> Decimal:
    """EMI = A / (N * 12); zero when there is no period to spread over"""
    if period_years == 0:
        return Decimal('0')
    return total_amount / scheduled_emi_count(period_years)


def calculate_loan_terms(principal: Decimal, period_years: int, annual_rate_percent: Decimal) -> LoanQuote:
    """
    Compute total payable and monthly EMI for a new loan.

    Args:
        principal: Amount lent, must be positive
        period_years: Loan period in whole years, must be positive
        annual_rate_percent: Yearly simple interest rate in percent, must not be negative

    Returns:
        LoanQuote with unrounded amounts

    Raises:
        ValidationError: if any precondition is violated or the total payable
            exceeds MAX_TOTAL_PAYABLE
    """
    if principal <= 0 or period_years <= 0 or annual_rate_percent < 0:
        raise ValidationError(
            "Loan amount and loan period must be positive. Interest rate cannot be negative."
        )

    total = total_amount_payable(principal, period_years, annual_rate_percent)
    if total > MAX_TOTAL_PAYABLE:
        raise ValidationError(
            f"Total amount payable cannot exceed {MAX_TOTAL_PAYABLE}"
        )
    return LoanQuote(
        total_amount_payable=total,
        monthly_emi=monthly_emi_for(total, period_years)
    )
