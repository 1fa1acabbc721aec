"""
Loan Module

Handles loan creation, EMI and lump-sum payment processing, and the
ACTIVE -> PAID_OFF lifecycle. Payment rules live in ``apply_payment``,
a pure function over loan state; ``LoanManager`` adds storage access and
serializes payments per loan.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Union
from enum import Enum
import uuid

from .amortization import calculate_loan_terms, round_money, scheduled_emi_count
from .exceptions import (
    AlreadyPaidError, DivisionUndefinedError, ExcessPaymentError,
    InvalidAmountError, InvalidPaymentTypeError, NotFoundError, ValidationError
)
from .logging_config import get_logger, log_action
from .storage import StorageInterface, StorageRecord


logger = get_logger("loan_service.loans")


class LoanStatus(Enum):
    """Loan lifecycle states"""
    ACTIVE = "ACTIVE"        # Accepting payments
    PAID_OFF = "PAID_OFF"    # All scheduled EMIs paid; terminal


class PaymentType(Enum):
    """Kinds of payment a loan accepts"""
    EMI = "EMI"              # Scheduled installment of exactly the current EMI
    LUMP_SUM = "LUMP_SUM"    # Prepayment that re-amortizes the remaining balance


@dataclass
class Loan(StorageRecord):
    """Loan with its fixed terms and mutable repayment state"""
    customer_id: str
    principal_amount: Decimal
    interest_rate: Decimal              # Annual percentage, e.g. 10 for 10%
    loan_period_years: int
    total_amount: Decimal               # Outstanding amount
    monthly_emi: Decimal                # Current EMI, changes on lump sums
    status: LoanStatus = LoanStatus.ACTIVE

    @property
    def loan_id(self) -> str:
        return self.id

    @property
    def is_paid_off(self) -> bool:
        return self.status == LoanStatus.PAID_OFF

    @property
    def scheduled_emis(self) -> int:
        return scheduled_emi_count(self.loan_period_years)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Loan':
        data = dict(data)
        for key in ('principal_amount', 'interest_rate', 'total_amount', 'monthly_emi'):
            data[key] = Decimal(data[key])
        data['loan_period_years'] = int(data['loan_period_years'])
        data['status'] = LoanStatus(data['status'])
        return super().from_dict(data)


@dataclass
class Payment(StorageRecord):
    """Append-only record of money received against a loan"""
    loan_id: str
    amount: Decimal
    payment_type: PaymentType
    payment_date: datetime

    @property
    def payment_id(self) -> str:
        return self.id

    @classmethod
    def from_dict(cls, data: Dict) -> 'Payment':
        data = dict(data)
        data['amount'] = Decimal(data['amount'])
        data['payment_type'] = PaymentType(data['payment_type'])
        data['payment_date'] = datetime.fromisoformat(data['payment_date'])
        return super().from_dict(data)


@dataclass
class PaymentOutcome:
    """Result of applying one payment to a loan"""
    loan: Loan
    payment: Payment
    emis_left: int

    @property
    def remaining_amount(self) -> Decimal:
        return self.loan.total_amount


def count_emis_paid(payments: List[Payment]) -> int:
    """Number of EMI installments paid so far"""
    return sum(1 for payment in payments if payment.payment_type == PaymentType.EMI)


def parse_payment_type(value: Union[str, PaymentType]) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    try:
        return PaymentType(value)
    except ValueError:
        raise InvalidPaymentTypeError("Invalid payment type")


def apply_payment(
    loan: Loan,
    payment_history: List[Payment],
    amount: Decimal,
    payment_type: Union[str, PaymentType],
    payment_date: Optional[datetime] = None,
    payment_id: Optional[str] = None
) -> PaymentOutcome:
    """
    Apply a payment to a loan without mutating either argument.

    EMI payments must match the current EMI at cent precision. The loan is
    paid off when the EMI count reaches the schedule. A lump sum may not
    exceed the outstanding amount; it re-amortizes what remains over the
    unpaid EMI slots and never pays the loan off by itself.

    Args:
        loan: Current loan state
        payment_history: Payments already recorded against the loan
        amount: Amount received
        payment_type: EMI or LUMP_SUM
        payment_date: When the payment was made (defaults to now)
        payment_id: Id for the new payment (generated when omitted)

    Returns:
        PaymentOutcome with the updated loan, the new payment and EMIs left
    """
    if amount <= 0:
        raise ValidationError("Payment amount must be positive")

    if loan.is_paid_off:
        raise AlreadyPaidError("Loan is already paid")

    payment_type = parse_payment_type(payment_type)
    now = datetime.now(timezone.utc)
    if payment_date and payment_date.tzinfo is None:
        payment_date = payment_date.replace(tzinfo=timezone.utc)
    emis_paid = count_emis_paid(payment_history)

    if payment_type == PaymentType.EMI:
        if amount != round_money(loan.monthly_emi):
            raise InvalidAmountError(
                "Either change the amount to the monthly EMI or change the payment type to LUMP_SUM"
            )
        emis_paid += 1
        status = LoanStatus.PAID_OFF if emis_paid >= loan.scheduled_emis else loan.status
        # Cent-rounded installments can overshoot the exact balance by a few cents
        updated_loan = replace(
            loan,
            total_amount=max(loan.total_amount - amount, Decimal('0')),
            status=status,
            updated_at=now
        )
    else:
        if amount > loan.total_amount:
            raise ExcessPaymentError("Payment amount is greater than the loan amount")
        emis_remaining = loan.scheduled_emis - emis_paid
        if emis_remaining <= 0:
            raise DivisionUndefinedError(
                "No EMIs remain to spread the remaining amount over"
            )
        remaining_amount = loan.total_amount - amount
        updated_loan = replace(
            loan,
            total_amount=remaining_amount,
            monthly_emi=remaining_amount / emis_remaining,
            updated_at=now
        )

    payment = Payment(
        id=payment_id or str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        loan_id=loan.id,
        amount=amount,
        payment_type=payment_type,
        payment_date=payment_date or now
    )

    return PaymentOutcome(
        loan=updated_loan,
        payment=payment,
        emis_left=loan.scheduled_emis - emis_paid
    )


class LoanManager:
    """
    Manages loans and their payments on an injected storage backend
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage

        self.loans_table = "loans"
        self.payments_table = "payments"

    def create_loan(
        self,
        customer_id: str,
        principal: Decimal,
        period_years: int,
        annual_rate_percent: Decimal,
        loan_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ) -> Loan:
        """
        Issue a new loan

        Args:
            customer_id: Borrower customer ID
            principal: Amount lent
            period_years: Loan period in years
            annual_rate_percent: Yearly simple interest rate in percent
            loan_id: Explicit ID (generated when omitted)
            created_at: Creation time (defaults to now)

        Returns:
            Created Loan object
        """
        quote = calculate_loan_terms(principal, period_years, annual_rate_percent)
        now = created_at or datetime.now(timezone.utc)

        loan = Loan(
            id=loan_id or str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            customer_id=customer_id,
            principal_amount=principal,
            interest_rate=annual_rate_percent,
            loan_period_years=period_years,
            total_amount=quote.total_amount_payable,
            monthly_emi=quote.monthly_emi,
            status=LoanStatus.ACTIVE
        )

        with self.storage.atomic():
            if self.storage.exists(self.loans_table, loan.id):
                raise ValidationError(f"Loan {loan.id} already exists")
            self._save_loan(loan)

        log_action(
            logger, "info", "Loan created",
            action="loan_created",
            resource=f"loan:{loan.id}",
            extra={
                "customer_id": customer_id,
                "principal_amount": str(principal),
                "interest_rate": str(annual_rate_percent),
                "loan_period_years": period_years,
                "total_amount": str(loan.total_amount)
            }
        )

        return loan

    def make_payment(
        self,
        loan_id: str,
        amount: Decimal,
        payment_type: Union[str, PaymentType],
        payment_date: Optional[datetime] = None
    ) -> PaymentOutcome:
        """
        Record a payment against a loan as one atomic unit

        Args:
            loan_id: Loan ID
            amount: Amount received
            payment_type: EMI or LUMP_SUM
            payment_date: Date of payment (defaults to now)

        Returns:
            PaymentOutcome for the recorded payment
        """
        # atomic() holds the storage lock across the read-modify-write
        with self.storage.atomic():
            loan = self.get_loan(loan_id)
            if not loan:
                raise NotFoundError("Loan not found")

            outcome = apply_payment(
                loan,
                self.get_loan_payments(loan_id),
                amount,
                payment_type,
                payment_date=payment_date
            )

            self._save_payment(outcome.payment)
            self._save_loan(outcome.loan)

        log_action(
            logger, "info", "Payment recorded",
            action="payment_recorded",
            resource=f"loan:{loan_id}",
            extra={
                "payment_id": outcome.payment.id,
                "payment_type": outcome.payment.payment_type.value,
                "amount": str(amount),
                "remaining_amount": str(outcome.remaining_amount),
                "monthly_emi": str(outcome.loan.monthly_emi),
                "emis_left": outcome.emis_left
            }
        )
        if outcome.loan.is_paid_off:
            log_action(logger, "info", "Loan paid off", action="loan_paid_off", resource=f"loan:{loan_id}")

        return outcome

    def get_loan(self, loan_id: str) -> Optional[Loan]:
        """Get loan by ID"""
        loan_dict = self.storage.load(self.loans_table, loan_id)
        if loan_dict:
            return Loan.from_dict(loan_dict)
        return None

    def get_customer_loans(self, customer_id: str) -> List[Loan]:
        """Get all loans for a customer"""
        loans_data = self.storage.find(self.loans_table, {"customer_id": customer_id})
        return [Loan.from_dict(data) for data in loans_data]

    def get_loan_payments(self, loan_id: str) -> List[Payment]:
        """Get payment history for loan, oldest first"""
        payments_data = self.storage.find(self.payments_table, {"loan_id": loan_id})
        payments = [Payment.from_dict(data) for data in payments_data]

        # Stable sort keeps insertion order for payments made at the same instant
        payments.sort(key=lambda x: x.payment_date)
        return payments

    def _save_loan(self, loan: Loan) -> None:
        self.storage.save(self.loans_table, loan.id, loan.to_dict())

    def _save_payment(self, payment: Payment) -> None:
        self.storage.save(self.payments_table, payment.id, payment.to_dict())
