"""
FastAPI dependencies
"""

from fastapi import Request

from ..exceptions import StorageError
from ..system import LoanSystem


def get_loan_system(request: Request) -> LoanSystem:
    """Loan system injected into the application at creation or startup"""
    system = request.app.state.loan_system
    if system is None:
        raise StorageError("Storage is not initialized")
    return system
