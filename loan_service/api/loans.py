"""
Loan endpoints
"""

from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status

from .dependencies import get_loan_system
from .schemas import (
    CreateLoanRequest, PaymentRequest, INVALID_LOAN_FIELDS, INVALID_PAYMENT_FIELDS,
    money, parse_request, payment_to_dict
)
from ..system import LoanSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_loan(
    payload: Dict[str, Any] = Body(...),
    system: LoanSystem = Depends(get_loan_system)
):
    """Issue a new loan"""
    request = parse_request(CreateLoanRequest, payload, INVALID_LOAN_FIELDS)
    loan = system.loan_manager.create_loan(
        customer_id=request.customer_id,
        principal=request.loan_amount,
        period_years=request.loan_period_years,
        annual_rate_percent=request.interest_rate_yearly
    )
    
    return {
        "loan_id": loan.id,
        "customer_id": loan.customer_id,
        "total_amount_payable": money(loan.total_amount),
        "monthly_emi": money(loan.monthly_emi)
    }


@router.post("/{loan_id}/payments", status_code=status.HTTP_201_CREATED)
def make_payment(
    loan_id: str,
    payload: Dict[str, Any] = Body(...),
    system: LoanSystem = Depends(get_loan_system)
):
    """Record an EMI or lump-sum payment"""
    request = parse_request(PaymentRequest, payload, INVALID_PAYMENT_FIELDS)
    outcome = system.loan_manager.make_payment(
        loan_id=loan_id,
        amount=request.amount,
        payment_type=request.payment_type
    )
    
    return {
        "payment_id": outcome.payment.id,
        "loan_id": loan_id,
        "message": "Payment recorded successfully.",
        "remaining_amount": money(outcome.remaining_amount),
        "payment_type": outcome.payment.payment_type.value,
        "emi_left": outcome.emis_left
    }


@router.get("/{loan_id}/ledger")
def get_ledger(
    loan_id: str,
    system: LoanSystem = Depends(get_loan_system)
):
    """Get loan balance and payment history"""
    ledger = system.reporting_engine.get_ledger(loan_id)
    
    return {
        "loan_id": ledger.loan_id,
        "customer_id": ledger.customer_id,
        "status": ledger.status.value,
        "principal": money(ledger.principal),
        "total_amount": money(ledger.total_amount),
        "monthly_emi": money(ledger.monthly_emi),
        "amount_paid": money(ledger.amount_paid),
        "balance_amount": money(ledger.balance_amount),
        "transactions": [payment_to_dict(payment) for payment in ledger.transactions]
    }
