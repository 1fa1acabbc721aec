"""
Tests for demo data seeding
"""

import pytest
from decimal import Decimal

from loan_service.loans import LoanStatus
from loan_service.seed import seed_demo_data
from loan_service.storage import InMemoryStorage, SQLiteStorage
from loan_service.system import LoanSystem


@pytest.fixture
def system():
    return LoanSystem(InMemoryStorage())


class TestSeedDemoData:
    """Test seeding of customers, loans and payments"""

    def test_seed_counts(self, system):
        results = seed_demo_data(system)

        assert results == {"customers": 3, "loans": 3, "payments": 4}
        assert system.storage.count("customers") == 3
        assert system.storage.count("loans") == 3
        assert system.storage.count("payments") == 4

    def test_seed_is_idempotent(self, system):
        seed_demo_data(system)
        results = seed_demo_data(system)

        assert results == {"customers": 0, "loans": 0, "payments": 0}
        assert system.storage.count("payments") == 4

    def test_seeded_loan_state(self, system):
        seed_demo_data(system)

        loan_001 = system.loan_manager.get_loan("loan_001")
        assert loan_001.total_amount == Decimal('9166.66')
        assert loan_001.status == LoanStatus.ACTIVE

        loan_002 = system.loan_manager.get_loan("loan_002")
        assert loan_002.total_amount == Decimal('5750')

        loan_003 = system.loan_manager.get_loan("loan_003")
        assert loan_003.customer_id == "cust_002"
        assert loan_003.total_amount == Decimal('18000')
        assert loan_003.monthly_emi == Decimal('18000') / 23

    def test_customer_without_loans(self, system):
        seed_demo_data(system)

        customer = system.customer_manager.get_customer("cust_003")
        assert customer.name == "Charlie Brown"
        assert system.loan_manager.get_customer_loans("cust_003") == []

    def test_seed_persists_to_sqlite(self, tmp_path):
        path = tmp_path / "bank.db"
        system = LoanSystem(SQLiteStorage(path))
        seed_demo_data(system)
        system.close()

        reopened = LoanSystem(SQLiteStorage(path))
        assert seed_demo_data(reopened) == {"customers": 0, "loans": 0, "payments": 0}
        payments = reopened.loan_manager.get_loan_payments("loan_003")
        assert [p.amount for p in payments] == [Decimal('1000.00'), Decimal('5000.00')]
        reopened.close()
