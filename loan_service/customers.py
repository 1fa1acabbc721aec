"""
Customer Module

Customers are owned outside the loan service; this module gives read access
to the Customers table and lets the seeder register demo customers.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional

from .exceptions import ValidationError
from .storage import StorageInterface, StorageRecord


@dataclass
class Customer(StorageRecord):
    """Borrower referenced by loans"""
    name: str

    @property
    def customer_id(self) -> str:
        return self.id


class CustomerManager:
    """Reads and registers customers"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.customers_table = "customers"

    def create_customer(self, customer_id: str, name: str) -> Customer:
        """Register a customer under an externally assigned ID"""
        if not customer_id or not name:
            raise ValidationError("Customer ID and name are required")

        now = datetime.now(timezone.utc)
        customer = Customer(id=customer_id, created_at=now, updated_at=now, name=name)

        with self.storage.atomic():
            if self.storage.exists(self.customers_table, customer_id):
                raise ValidationError(f"Customer {customer_id} already exists")
            self.storage.save(self.customers_table, customer.id, customer.to_dict())

        return customer

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        data = self.storage.load(self.customers_table, customer_id)
        if data:
            return Customer.from_dict(data)
        return None
