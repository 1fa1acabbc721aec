"""
Customer endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_loan_system
from .schemas import money
from ..system import LoanSystem


router = APIRouter()


@router.get("/{customer_id}/overview")
def get_customer_overview(
    customer_id: str,
    system: LoanSystem = Depends(get_loan_system)
):
    """Get all loans of a customer with EMIs paid and left"""
    overview = system.reporting_engine.get_customer_overview(customer_id)
    
    loans = []
    for summary in overview.loans:
        loan = summary.loan
        loans.append({
            "loan_id": loan.id,
            "customer_id": loan.customer_id,
            "principal_amount": money(loan.principal_amount),
            "interest_rate": float(loan.interest_rate),
            "loan_period_years": loan.loan_period_years,
            "total_amount": money(loan.total_amount),
            "monthly_emi": money(loan.monthly_emi),
            "status": loan.status.value,
            "created_at": loan.created_at.isoformat(),
            "emis_paid": summary.emis_paid,
            "emis_left": summary.emis_left
        })
    
    return {
        "customer_id": overview.customer_id,
        "customer_name": overview.customer_name,
        "total_loans": overview.total_loans,
        "loans": loans
    }
