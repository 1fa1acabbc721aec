#!/usr/bin/env python3
"""Seed script for the loan service

Inserts demo data:
- 3 customers
- 3 loans (two for cust_001, one for cust_002)
- 4 dated payments, applied through the payment rules so loan state matches

Records that already exist are left alone. Run with: python -m loan_service.seed
"""

import sys
from decimal import Decimal
from datetime import datetime, timezone
from typing import Dict

from .config import get_config
from .exceptions import StorageError
from .loans import PaymentType
from .logging_config import get_logger, log_action, setup_logging
from .system import LoanSystem


logger = get_logger("loan_service.seed")

DEMO_CUSTOMERS = [
    ('cust_001', 'Alice Smith'),
    ('cust_002', 'Bob Johnson'),
    ('cust_003', 'Charlie Brown'),
]

DEMO_LOANS = [
    {'loan_id': 'loan_001', 'customer_id': 'cust_001', 'principal': Decimal('10000'),
     'period_years': 1, 'annual_rate_percent': Decimal('10')},
    {'loan_id': 'loan_002', 'customer_id': 'cust_001', 'principal': Decimal('5000'),
     'period_years': 1, 'annual_rate_percent': Decimal('15')},
    {'loan_id': 'loan_003', 'customer_id': 'cust_002', 'principal': Decimal('20000'),
     'period_years': 2, 'annual_rate_percent': Decimal('10')},
]

DEMO_PAYMENTS = [
    ('loan_001', Decimal('916.67'), PaymentType.EMI, datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)),
    ('loan_001', Decimal('916.67'), PaymentType.EMI, datetime(2025, 2, 15, 10, 0, tzinfo=timezone.utc)),
    ('loan_003', Decimal('1000.00'), PaymentType.EMI, datetime(2025, 3, 1, 11, 0, tzinfo=timezone.utc)),
    ('loan_003', Decimal('5000.00'), PaymentType.LUMP_SUM, datetime(2025, 4, 5, 14, 30, tzinfo=timezone.utc)),
]


def seed_demo_data(system: LoanSystem) -> Dict[str, int]:
    """Insert missing demo records and return how many of each were added"""
    results = {"customers": 0, "loans": 0, "payments": 0}

    for customer_id, name in DEMO_CUSTOMERS:
        if system.customer_manager.get_customer(customer_id):
            continue
        system.customer_manager.create_customer(customer_id, name)
        results["customers"] += 1

    # Payments are only replayed onto loans created in this run
    new_loans = set()
    for loan in DEMO_LOANS:
        if system.loan_manager.get_loan(loan['loan_id']):
            continue
        system.loan_manager.create_loan(
            customer_id=loan['customer_id'],
            principal=loan['principal'],
            period_years=loan['period_years'],
            annual_rate_percent=loan['annual_rate_percent'],
            loan_id=loan['loan_id']
        )
        new_loans.add(loan['loan_id'])
        results["loans"] += 1

    for loan_id, amount, payment_type, payment_date in DEMO_PAYMENTS:
        if loan_id not in new_loans:
            continue
        system.loan_manager.make_payment(loan_id, amount, payment_type, payment_date=payment_date)
        results["payments"] += 1

    log_action(logger, "info", "Demo data seeded", action="seed_demo_data", extra=results)
    return results


def main() -> int:
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    try:
        system = LoanSystem.from_config(config)
    except StorageError as e:
        logger.critical(f"DB Error: {e.message}")
        return 1

    try:
        results = seed_demo_data(system)
    finally:
        system.close()

    print(f"Seeded {results['customers']} customers, {results['loans']} loans, "
          f"{results['payments']} payments")
    return 0


if __name__ == "__main__":
    sys.exit(main())
