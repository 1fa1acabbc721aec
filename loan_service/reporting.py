"""
Reporting Module

Read-only views over loans and payments: the per-loan ledger and the
per-customer overview.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Dict, List

from .amortization import total_amount_payable
from .customers import Customer, CustomerManager
from .exceptions import NoLoansError, NotFoundError
from .loans import Loan, LoanManager, LoanStatus, Payment, count_emis_paid
from .storage import StorageInterface


@dataclass
class LedgerView:
    """Point-in-time balance of a loan against its original terms"""
    loan_id: str
    customer_id: str
    principal: Decimal
    total_amount: Decimal        # Original principal + interest, unaffected by lump sums
    monthly_emi: Decimal         # Current EMI
    amount_paid: Decimal
    balance_amount: Decimal
    status: LoanStatus
    transactions: List[Payment]


@dataclass
class LoanSummary:
    """A loan annotated with its installment progress"""
    loan: Loan
    emis_paid: int
    emis_left: int


@dataclass
class CustomerOverview:
    customer_id: str
    customer_name: str
    loans: List[LoanSummary]

    @property
    def total_loans(self) -> int:
        return len(self.loans)


def build_ledger(loan: Loan, payments: List[Payment]) -> LedgerView:
    """
    Aggregate a loan's payments against its original total.

    The total is recomputed from principal, period and rate so the ledger
    keeps a stable baseline however many lump sums were applied. The
    balance never goes below zero.
    """
    total_amount = total_amount_payable(
        loan.principal_amount, loan.loan_period_years, loan.interest_rate
    )
    amount_paid = sum((payment.amount for payment in payments), Decimal('0'))

    return LedgerView(
        loan_id=loan.id,
        customer_id=loan.customer_id,
        principal=loan.principal_amount,
        total_amount=total_amount,
        monthly_emi=loan.monthly_emi,
        amount_paid=amount_paid,
        # Cent-rounded EMIs can overshoot the total by a few cents
        balance_amount=max(total_amount - amount_paid, Decimal('0')),
        status=loan.status,
        transactions=sorted(payments, key=lambda x: x.payment_date)
    )


def build_customer_overview(
    customer: Customer,
    loans: List[Loan],
    payments_by_loan: Dict[str, List[Payment]]
) -> CustomerOverview:
    """Summarize every loan of a customer with EMIs paid and left"""
    if not loans:
        raise NoLoansError("No Loans Found")

    summaries = []
    for loan in loans:
        emis_paid = count_emis_paid(payments_by_loan.get(loan.id, []))
        summaries.append(LoanSummary(
            loan=loan,
            emis_paid=emis_paid,
            emis_left=loan.scheduled_emis - emis_paid
        ))

    return CustomerOverview(
        customer_id=customer.id,
        customer_name=customer.name,
        loans=summaries
    )


class ReportingEngine:
    """Builds reports from a consistent storage snapshot"""

    def __init__(
        self,
        storage: StorageInterface,
        loan_manager: LoanManager,
        customer_manager: CustomerManager
    ):
        self.storage = storage
        self.loan_manager = loan_manager
        self.customer_manager = customer_manager

    def get_ledger(self, loan_id: str) -> LedgerView:
        with self.storage.snapshot():
            loan = self.loan_manager.get_loan(loan_id)
            if not loan:
                raise NotFoundError("Loan not found")
            payments = self.loan_manager.get_loan_payments(loan_id)

        return build_ledger(loan, payments)

    def get_customer_overview(self, customer_id: str) -> CustomerOverview:
        with self.storage.snapshot():
            customer = self.customer_manager.get_customer(customer_id)
            if not customer:
                raise NotFoundError("Customer Not Found")
            loans = self.loan_manager.get_customer_loans(customer_id)
            payments_by_loan = {
                loan.id: self.loan_manager.get_loan_payments(loan.id) for loan in loans
            }

        return build_customer_overview(customer, loans, payments_by_loan)
