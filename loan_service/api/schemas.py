"""
Request parsing and response helpers for the HTTP API

Request bodies are checked for required fields, then parsed into typed
pydantic models. Numbers are parsed explicitly: booleans, non-numeric
strings and non-finite values are rejected rather than coerced.
"""

from decimal import Decimal, InvalidOperation
import math
from typing import Any, Dict, Type, TypeVar
from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from ..amortization import round_money
from ..exceptions import ValidationError
from ..loans import Payment


INVALID_LOAN_FIELDS = (
    "Invalid data types for one or more fields. Ensure loan_amount, "
    "loan_period_years, and interest_rate_yearly are numbers."
)
INVALID_PAYMENT_FIELDS = (
    "Invalid data types for one or more fields. Ensure amount is a number "
    "and payment_type is a string."
)

RequestModel = TypeVar('RequestModel', bound=BaseModel)


def parse_decimal(value: Any) -> Decimal:
    """Parse a JSON number or numeric string into a finite Decimal"""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError("must be a number")
    try:
        # str() keeps the shortest decimal form of floats, e.g. 916.67
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("must be a number")
    # Values beyond float range would overflow arithmetic and JSON output
    if not result.is_finite() or math.isinf(float(result)):
        raise ValueError("must be a finite number")
    return result


class CreateLoanRequest(BaseModel):
    customer_id: str
    loan_amount: Decimal
    loan_period_years: int
    interest_rate_yearly: Decimal

    @field_validator("customer_id", mode="before")
    @classmethod
    def customer_id_as_text(cls, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError("customer_id must be a string")
        value = str(value).strip()
        if not value:
            raise ValueError("customer_id must not be empty")
        return value

    @field_validator("loan_amount", "interest_rate_yearly", mode="before")
    @classmethod
    def amount_as_decimal(cls, value: Any) -> Decimal:
        return parse_decimal(value)

    @field_validator("loan_period_years", mode="before")
    @classmethod
    def period_as_whole_years(cls, value: Any) -> int:
        years = parse_decimal(value)
        if years != years.to_integral_value():
            raise ValueError("loan_period_years must be a whole number")
        return int(years)


class PaymentRequest(BaseModel):
    amount: Decimal
    payment_type: str

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_decimal(cls, value: Any) -> Decimal:
        return parse_decimal(value)

    @field_validator("payment_type", mode="before")
    @classmethod
    def payment_type_is_text(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("payment_type must be a string")
        return value


def parse_request(model: Type[RequestModel], payload: Dict[str, Any], error_message: str) -> RequestModel:
    """
    Validate a raw JSON body against a request model.

    Raises:
        ValidationError: naming the first missing field, or with error_message
            when a value cannot be parsed
    """
    for name in model.model_fields:
        if name not in payload:
            raise ValidationError(f"Missing required field: {name}")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(error_message) from e


def money(amount: Decimal) -> float:
    """Monetary value rounded to cents for display"""
    return float(round_money(amount))


def payment_to_dict(payment: Payment) -> Dict[str, Any]:
    return {
        "payment_id": payment.id,
        "loan_id": payment.loan_id,
        "amount": money(payment.amount),
        "payment_type": payment.payment_type.value,
        "payment_date": payment.payment_date.isoformat()
    }
