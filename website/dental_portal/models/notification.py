from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter, field_validator

from dental_portal.models.appointment_status import ACTION_TAKEN_STATUSES
from dental_portal.models.base import CamelModel, parse_records

# Statuses from which the inbox menu offers (re-)accepting or cancelling.
REACCEPT_FROM = {"cancelled", "pending", "tentative", "To Pay"}
CANCEL_FROM = {"confirmed", "scheduled", "pending", "tentative", "To Pay"}

NEW_NOTIFICATION_WINDOW = timedelta(hours=24)


class AppointmentMetadata(CamelModel):
    appointment_id: Optional[str] = None
    current_status: Optional[str] = None
    is_request: bool = False
    patient_name: Optional[str] = None


class PaymentMetadata(CamelModel):
    appointment_id: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    patient_name: Optional[str] = None


class MessageMetadata(CamelModel):
    sender: Optional[str] = None


class NotificationBase(CamelModel):
    id: str
    title: str = ""
    message: str
    created_at: datetime
    is_read: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value):
        return str(value)

    def is_new(self, now=None):
        now = now or datetime.now(timezone.utc)
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at > now - NEW_NOTIFICATION_WINDOW


class AppointmentNotification(NotificationBase):
    type: Literal["appointment"] = "appointment"
    metadata: AppointmentMetadata = Field(default_factory=AppointmentMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value):
        return {} if value is None else value

    @property
    def has_request_actions(self):
        return bool(self.metadata.appointment_id and self.metadata.is_request)

    @property
    def action_taken(self):
        return (self.metadata.current_status or "") in ACTION_TAKEN_STATUSES

    @property
    def accept_label(self):
        if self.metadata.current_status in ("confirmed", "scheduled"):
            return "Accepted"
        return "Accept"

    @property
    def decline_label(self):
        if self.metadata.current_status == "cancelled":
            return "Declined"
        return "Decline"

    @property
    def can_accept(self):
        return bool(self.metadata.appointment_id) and self.metadata.current_status in REACCEPT_FROM

    @property
    def can_cancel(self):
        return bool(self.metadata.appointment_id) and self.metadata.current_status in CANCEL_FROM

    @property
    def accept_menu_label(self):
        if self.metadata.current_status == "cancelled":
            return "Re-accept Appointment"
        return "Accept Appointment"

    @property
    def cancel_menu_label(self):
        if self.metadata.current_status in ("confirmed", "scheduled"):
            return "Cancel Appointment"
        return "Decline Request"


class PaymentNotification(NotificationBase):
    type: Literal["payment"] = "payment"
    metadata: PaymentMetadata = Field(default_factory=PaymentMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value):
        return {} if value is None else value


class MessageNotification(NotificationBase):
    type: Literal["message"] = "message"
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value):
        return {} if value is None else value


class SystemNotification(NotificationBase):
    type: Literal["system"] = "system"


Notification = Annotated[
    Union[AppointmentNotification, PaymentNotification, MessageNotification, SystemNotification],
    Field(discriminator="type"),
]

notification_adapter = TypeAdapter(Notification)


def parse_notifications(items):
    return parse_records(notification_adapter.validate_python, items)


def notification_badge(notification):
    """Icon name and badge colour shown next to a notification."""
    if isinstance(notification, AppointmentNotification):
        return "calendar", "violet"
    if isinstance(notification, PaymentNotification):
        return "credit-card", "emerald"
    if isinstance(notification, MessageNotification):
        return "message-square", "fuchsia"
    if isinstance(notification, SystemNotification):
        return "info", "slate"
    raise TypeError(f"Unknown notification type: {type(notification).__name__}")


def avatar_seed(notification):
    if isinstance(notification, (AppointmentNotification, PaymentNotification)):
        return notification.metadata.patient_name or notification.title
    if isinstance(notification, MessageNotification):
        return notification.metadata.sender or notification.title
    if isinstance(notification, SystemNotification):
        return notification.title
    raise TypeError(f"Unknown notification type: {type(notification).__name__}")
