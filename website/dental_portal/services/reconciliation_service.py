"""Turns a notification action (Accept / Decline / cancellation request) into
confirmed appointment status and a retired notification.

The sequence is:

1. update the appointment status; on failure stop here, the notification
   stays unread and nothing is refreshed
2. report success (a ``tentative`` target reads as a cancellation request)
3. mark the originating notification read; a failure here is only reported,
   the status change is not rolled back
4. re-fetch appointments and notifications, whatever happened in step 3
"""

import logging

from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.services.errors import ApiError
from dental_portal.services.notify import discard

logger = logging.getLogger(__name__)

STATUS_UPDATE_FAILED = "Failed to update appointment status"


def status_update_message(status):
    status = AppointmentStatus(status)
    if status == AppointmentStatus.TENTATIVE:
        return "Cancellation request sent"
    return f"Appointment status updated to {status.value}"


def apply_status_change(appointments, appointment_id, new_status, notify=None):
    notify = notify or discard
    new_status = AppointmentStatus(new_status)

    try:
        appointments.update_appointment(appointment_id, {"status": new_status})
    except ApiError as e:
        logger.error(f"Status change of appointment {appointment_id} to {new_status.value} failed: {e.message}")
        notify(STATUS_UPDATE_FAILED, "danger")
        return False

    notify(status_update_message(new_status), "success")
    return True


def resolve_notification_action(appointments, notifications, appointment_id, new_status, notification_id, notify=None):
    if not apply_status_change(appointments, appointment_id, new_status, notify):
        return False

    if not notifications.mark_as_read(notification_id):
        logger.warning(
            f"Appointment {appointment_id} updated but notification {notification_id} is still unread"
        )

    appointments.invalidate()
    notifications.invalidate()
    return True
