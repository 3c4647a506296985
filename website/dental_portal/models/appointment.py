import datetime as dt
from typing import Optional

from pydantic import field_validator

from dental_portal.models.appointment_status import AppointmentStatus, PENDING_REQUEST_STATUSES
from dental_portal.models.base import CamelModel

class Appointment(CamelModel):
    id: str
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    doctor: Optional[str] = None
    date: dt.date
    time: str = ""
    duration: Optional[int] = None
    type: Optional[str] = None
    custom_type: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    price: float = 0
    payment_status: Optional[str] = None
    total_paid: float = 0
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    @field_validator("id", "patient_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value):
        if value is None:
            return value
        return str(value)

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time_part(cls, value):
        # the API sometimes sends full ISO timestamps for calendar days
        if isinstance(value, str) and "T" in value:
            return value.split("T")[0]
        return value

    @field_validator("price", "total_paid", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, value):
        return 0 if value is None else value

    @property
    def label(self):
        return self.custom_type or self.type or "Appointment"

    @property
    def outstanding_balance(self):
        return (self.price or 0) - (self.total_paid or 0)

    @property
    def is_pending_request(self):
        return self.status.value in PENDING_REQUEST_STATUSES

    def __repr__(self):
        return f"<Appointment {self.id} {self.date} {self.time} ({self.status.value})>"
