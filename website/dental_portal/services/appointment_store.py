import logging
from datetime import date

from dental_portal.models.appointment import Appointment
from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.models.base import parse_records
from dental_portal.services.api_client import envelope_data
from dental_portal.services.errors import ApiError
from dental_portal.services.notify import discard

logger = logging.getLogger(__name__)

FILTER_KEYS = ("doctor", "startDate", "endDate", "search", "patientId")


class AppointmentStore:
    """Cache of appointments as last confirmed by the server.

    ``update_appointment`` never touches the cache; the new state only shows up
    after ``refresh_appointments`` (or ``invalidate``) re-fetches it.
    """

    def __init__(self, api, notify=None, filters=None):
        self.api = api
        self.notify = notify or discard
        self.filters = {key: value for key, value in (filters or {}).items() if key in FILTER_KEYS}
        self.appointments = []
        self.is_loading = False
        self.is_stale = True

    def refresh_appointments(self, filters=None):
        if filters is not None:
            self.filters = {key: value for key, value in filters.items() if key in FILTER_KEYS}

        self.is_loading = True
        self.is_stale = True
        try:
            payload = self.api.get("/appointments", params=self.filters)
        except ApiError as e:
            logger.error(f"Error loading appointments ({self.filters}): {e.message}")
            self.notify("Failed to load appointments", "danger")
            return False
        finally:
            self.is_loading = False

        self.appointments = parse_records(Appointment.model_validate, envelope_data(payload, []))
        self.is_stale = False
        return True

    def invalidate(self):
        """Mark the cache stale and re-fetch it."""
        self.is_stale = True
        return self.refresh_appointments()

    def update_appointment(self, appointment_id, updates):
        body = {
            key: value.value if isinstance(value, AppointmentStatus) else value
            for key, value in updates.items()
        }
        logger.info(f"Updating appointment {appointment_id}: {sorted(body)}")
        self.api.put(f"/appointments/{appointment_id}", json=body)

    def get(self, appointment_id):
        return next((apt for apt in self.appointments if apt.id == str(appointment_id)), None)

    def get_appointments_by_date(self, day):
        return [apt for apt in self.appointments if apt.date == day]

    def get_upcoming_appointments(self, doctor=None, today=None):
        today = today or date.today()
        upcoming = [
            apt for apt in self.appointments
            if apt.date >= today and (not doctor or apt.doctor == doctor)
        ]
        return sorted(upcoming, key=lambda apt: (apt.date, apt.time))

    def pending_requests(self):
        return sorted(
            (apt for apt in self.appointments if apt.is_pending_request),
            key=lambda apt: (apt.date, apt.time),
        )
