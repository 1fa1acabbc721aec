"""
Loan service components wired around one injected storage handle
"""

from .config import LoanServiceConfig
from .customers import CustomerManager
from .loans import LoanManager
from .reporting import ReportingEngine
from .storage import StorageInterface, create_storage


class LoanSystem:
    """Loan service with all components initialized"""
    
    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.customer_manager = CustomerManager(self.storage)
        self.loan_manager = LoanManager(self.storage)
        self.reporting_engine = ReportingEngine(
            self.storage, self.loan_manager, self.customer_manager
        )
    
    @classmethod
    def from_config(cls, config: LoanServiceConfig) -> 'LoanSystem':
        """Open the configured storage; raises StorageError if it is unavailable"""
        return cls(create_storage(config.storage_backend, config.database_path))
    
    def close(self) -> None:
        self.storage.close()
