"""
Test suite for reporting module

Tests ledger aggregation against original loan terms and the customer
overview with EMIs paid and left.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from loan_service.customers import CustomerManager
from loan_service.exceptions import NoLoansError, NotFoundError
from loan_service.loans import LoanManager, LoanStatus, PaymentType
from loan_service.reporting import ReportingEngine, build_customer_overview, build_ledger
from loan_service.storage import InMemoryStorage


JAN = datetime(2025, 1, 15, tzinfo=timezone.utc)
FEB = datetime(2025, 2, 15, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def loan_manager(storage):
    return LoanManager(storage)


@pytest.fixture
def customer_manager(storage):
    return CustomerManager(storage)


@pytest.fixture
def reporting_engine(storage, loan_manager, customer_manager):
    return ReportingEngine(storage, loan_manager, customer_manager)


class TestLedger:
    """Test loan ledger aggregation"""

    def test_ledger_after_emi_and_lump_sum(self, loan_manager, reporting_engine):
        loan = loan_manager.create_loan("cust_002", Decimal('20000'), 2, Decimal('10'))
        loan_manager.make_payment(loan.id, Decimal('1000'), PaymentType.EMI, payment_date=JAN)
        loan_manager.make_payment(loan.id, Decimal('5000'), PaymentType.LUMP_SUM, payment_date=FEB)

        ledger = reporting_engine.get_ledger(loan.id)

        assert ledger.loan_id == loan.id
        assert ledger.customer_id == "cust_002"
        assert ledger.principal == Decimal('20000')
        assert ledger.total_amount == Decimal('24000')  # Original baseline
        assert ledger.monthly_emi == Decimal('18000') / 23  # Current EMI
        assert ledger.amount_paid == Decimal('6000')
        assert ledger.balance_amount == Decimal('18000')
        assert ledger.status == LoanStatus.ACTIVE
        assert [p.payment_type for p in ledger.transactions] == [PaymentType.EMI, PaymentType.LUMP_SUM]

    def test_amount_paid_sums_every_payment(self, loan_manager, reporting_engine):
        loan = loan_manager.create_loan("cust_001", Decimal('10000'), 1, Decimal('10'))
        loan_manager.make_payment(loan.id, Decimal('916.67'), PaymentType.EMI)
        loan_manager.make_payment(loan.id, Decimal('2000'), PaymentType.LUMP_SUM)
        loan_manager.make_payment(loan.id, Decimal('1000'), PaymentType.LUMP_SUM)

        ledger = reporting_engine.get_ledger(loan.id)

        assert ledger.amount_paid == Decimal('3916.67')
        assert ledger.balance_amount == Decimal('11000') - Decimal('3916.67')

    def test_ledger_without_payments(self, loan_manager, reporting_engine):
        loan = loan_manager.create_loan("cust_001", Decimal('10000'), 1, Decimal('10'))

        ledger = reporting_engine.get_ledger(loan.id)

        assert ledger.amount_paid == Decimal('0')
        assert ledger.balance_amount == Decimal('11000')
        assert ledger.transactions == []

    def test_transactions_in_chronological_order(self, loan_manager):
        loan = loan_manager.create_loan("cust_001", Decimal('10000'), 1, Decimal('10'))
        late = loan_manager.make_payment(loan.id, Decimal('916.67'), PaymentType.EMI, payment_date=FEB)
        early = loan_manager.make_payment(loan.id, Decimal('100'), PaymentType.LUMP_SUM, payment_date=JAN)

        ledger = build_ledger(loan, [late.payment, early.payment])

        assert [p.id for p in ledger.transactions] == [early.payment.id, late.payment.id]

    def test_unknown_loan(self, reporting_engine):
        with pytest.raises(NotFoundError, match="Loan not found"):
            reporting_engine.get_ledger("missing")


class TestCustomerOverview:
    """Test customer overview aggregation"""

    def test_overview_counts_emis(self, customer_manager, loan_manager, reporting_engine):
        customer_manager.create_customer("cust_001", "Alice Smith")
        first = loan_manager.create_loan("cust_001", Decimal('10000'), 1, Decimal('10'))
        second = loan_manager.create_loan("cust_001", Decimal('20000'), 2, Decimal('10'))
        loan_manager.make_payment(first.id, Decimal('916.67'), PaymentType.EMI)
        loan_manager.make_payment(first.id, Decimal('916.67'), PaymentType.EMI)
        loan_manager.make_payment(second.id, Decimal('5000'), PaymentType.LUMP_SUM)

        overview = reporting_engine.get_customer_overview("cust_001")

        assert overview.customer_id == "cust_001"
        assert overview.customer_name == "Alice Smith"
        assert overview.total_loans == 2
        by_id = {summary.loan.id: summary for summary in overview.loans}
        assert by_id[first.id].emis_paid == 2
        assert by_id[first.id].emis_left == 10
        assert by_id[second.id].emis_paid == 0
        assert by_id[second.id].emis_left == 24
        assert by_id[second.id].loan.total_amount == Decimal('19000')

    def test_unknown_customer(self, reporting_engine):
        with pytest.raises(NotFoundError, match="Customer Not Found"):
            reporting_engine.get_customer_overview("cust_999")

    def test_customer_without_loans(self, customer_manager, reporting_engine):
        customer_manager.create_customer("cust_003", "Charlie Brown")

        with pytest.raises(NoLoansError, match="No Loans Found"):
            reporting_engine.get_customer_overview("cust_003")

    def test_build_overview_requires_loans(self, customer_manager):
        customer = customer_manager.create_customer("cust_003", "Charlie Brown")

        with pytest.raises(NoLoansError):
            build_customer_overview(customer, [], {})


class TestPaidOffLedger:
    """Ledger and loan agree once every EMI is paid"""

    def test_balance_floored_at_zero(self, loan_manager, reporting_engine):
        loan = loan_manager.create_loan("cust_001", Decimal('10000'), 1, Decimal('10'))
        for _ in range(12):
            loan_manager.make_payment(loan.id, Decimal('916.67'), PaymentType.EMI)

        ledger = reporting_engine.get_ledger(loan.id)

        assert ledger.status == LoanStatus.PAID_OFF
        assert ledger.amount_paid == Decimal('11000.04')
        assert ledger.balance_amount == Decimal('0')
        assert loan_manager.get_loan(loan.id).total_amount == ledger.balance_amount
