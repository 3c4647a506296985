import logging
from datetime import date, datetime, timezone

from dental_portal.models.temp_patient_session import TempPatientSession
from dental_portal.services.api_client import envelope_data
from dental_portal.services.errors import ApiError

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("firstName", "lastName", "phone")
APPOINTMENT_FIELDS = ("type", "date", "time", "doctor")


def validate_booking(form, today=None):
    if any(not (form.get(field) or "").strip() for field in CONTACT_FIELDS):
        return "Please fill in all required contact information"

    if any(not (form.get(field) or "").strip() for field in APPOINTMENT_FIELDS):
        return "Please complete all appointment details"

    try:
        requested = datetime.strptime(form["date"], "%Y-%m-%d").date()
    except ValueError:
        return "Date must be in YYYY-MM-DD format."

    if requested < (today or date.today()):
        return "Please select a date in the future"

    return None


def book_public_appointment(api, form, today=None):
    """Send a guest booking request.

    Returns ``(temp_session, error)``; the temp session carries the guest's
    contact details so the booking can be continued later.
    """
    error = validate_booking(form, today)
    if error:
        return None, error

    body = {
        key: (form.get(key) or "").strip()
        for key in ("firstName", "lastName", "email", "phone", "date", "time", "type", "customType", "doctor", "notes")
    }

    try:
        payload = api.post("/appointments/public-book", json=body)
    except ApiError as e:
        return None, e.message or "Failed to book appointment"

    logger.info(f"Public booking created: {envelope_data(payload, {}).get('id')}")

    temp_session = TempPatientSession(
        is_temporary_login=True,
        first_name=body["firstName"],
        last_name=body["lastName"],
        email=body["email"],
        phone=body["phone"],
        login_time=datetime.now(timezone.utc),
    )
    return temp_session, None
