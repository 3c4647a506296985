from enum import Enum

class AppointmentStatus(str, Enum):
    PENDING = "pending"
    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    TO_PAY = "To Pay"

# Accept/Decline buttons stay disabled once a request reaches one of these.
ACTION_TAKEN_STATUSES = {
    AppointmentStatus.CONFIRMED.value,
    AppointmentStatus.CANCELLED.value,
    AppointmentStatus.COMPLETED.value,
    AppointmentStatus.SCHEDULED.value,
}

PENDING_REQUEST_STATUSES = {
    AppointmentStatus.PENDING.value,
    AppointmentStatus.TENTATIVE.value,
    AppointmentStatus.TO_PAY.value,
}
