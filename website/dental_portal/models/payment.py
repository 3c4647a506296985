import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import field_validator

from dental_portal.models.base import CamelModel

class PaymentMethod(str, Enum):
    CREDIT_CARD = "Credit Card"
    CASH = "Cash"
    DEBIT_CARD = "Debit Card"
    INSURANCE = "Insurance"
    CHECK = "Check"
    BANK_TRANSFER = "Bank Transfer"

DEFAULT_PAYMENT_METHODS = [method.value for method in PaymentMethod]

class Payment(CamelModel):
    id: str
    appointment_id: Optional[str] = None
    patient_id: Optional[str] = None
    amount: float
    method: PaymentMethod
    date: Optional[dt.date] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("id", "appointment_id", "patient_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value):
        if value is None:
            return value
        return str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time_part(cls, value):
        if isinstance(value, str) and "T" in value:
            return value.split("T")[0]
        return value or None

    def __repr__(self):
        return f"<Payment {self.id} {self.amount:.2f} via {self.method.value}>"
