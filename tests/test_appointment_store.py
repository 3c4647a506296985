from datetime import date, timedelta

import pytest

from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.services.appointment_store import AppointmentStore
from dental_portal.services.errors import ValidationError


@pytest.fixture
def store(api, notify):
    return AppointmentStore(api, notify)


def test_refresh_loads_appointments(store, fake_api):
    fake_api.add_appointment("A1", date="2030-05-01T00:00:00.000Z")

    assert store.refresh_appointments() is True

    appointment = store.get("A1")
    assert appointment.date == date(2030, 5, 1)
    assert appointment.status == AppointmentStatus.PENDING
    assert store.is_loading is False
    assert store.is_stale is False


def test_refresh_sends_filters(store, fake_api):
    store.refresh_appointments({"doctor": "Dr. Smith", "startDate": "2030-01-01", "color": "red"})

    sent = fake_api.requests[-1].url.params
    assert sent["doctor"] == "Dr. Smith"
    assert sent["startDate"] == "2030-01-01"
    assert "color" not in sent


def test_scoped_store_only_sees_its_patient(api, fake_api):
    fake_api.add_appointment("A1", patientId="P1")
    fake_api.add_appointment("A2", patientId="P2")

    store = AppointmentStore(api, filters={"patientId": "P2"})
    store.refresh_appointments()

    assert [apt.id for apt in store.appointments] == ["A2"]


def test_failed_refresh_keeps_previous_list(store, fake_api, notices):
    fake_api.add_appointment("A1")
    store.refresh_appointments()

    fake_api.fail("GET", "/appointments")
    assert store.refresh_appointments() is False

    assert [apt.id for apt in store.appointments] == ["A1"]
    assert notices == [("danger", "Failed to load appointments")]


def test_update_does_not_touch_cache(store, fake_api):
    fake_api.add_appointment("A1")
    store.refresh_appointments()

    store.update_appointment("A1", {"status": AppointmentStatus.CONFIRMED})

    assert fake_api.appointments["A1"]["status"] == "confirmed"
    assert store.get("A1").status == AppointmentStatus.PENDING

    store.invalidate()
    assert store.get("A1").status == AppointmentStatus.CONFIRMED


def test_update_raises_on_rejection(store, fake_api):
    with pytest.raises(ValidationError, match="Appointment not found"):
        store.update_appointment("missing", {"status": "confirmed"})


def test_upcoming_is_sorted_and_excludes_past(store, fake_api):
    today = date(2030, 1, 10)
    fake_api.add_appointment("past", date=(today - timedelta(days=1)).isoformat())
    fake_api.add_appointment("later", date=(today + timedelta(days=2)).isoformat(), time="08:00")
    fake_api.add_appointment("soon-late", date=today.isoformat(), time="15:00")
    fake_api.add_appointment("soon-early", date=today.isoformat(), time="09:30")
    fake_api.add_appointment("other-doctor", date=today.isoformat(), doctor="Dr. Jones")
    store.refresh_appointments()

    upcoming = store.get_upcoming_appointments(doctor="Dr. Smith", today=today)

    assert [apt.id for apt in upcoming] == ["soon-early", "soon-late", "later"]


def test_pending_requests_and_by_date(store, fake_api):
    fake_api.add_appointment("A1", status="pending", date="2030-02-01")
    fake_api.add_appointment("A2", status="tentative", date="2030-02-02")
    fake_api.add_appointment("A3", status="confirmed", date="2030-02-01")
    store.refresh_appointments()

    assert [apt.id for apt in store.pending_requests()] == ["A1", "A2"]
    assert {apt.id for apt in store.get_appointments_by_date(date(2030, 2, 1))} == {"A1", "A3"}


def test_to_pay_appointments_load_as_requests(store, fake_api, notices):
    fake_api.add_appointment("A1", status="confirmed")
    fake_api.add_appointment("A2", status="To Pay")

    assert store.refresh_appointments() is True

    assert store.get("A2").status == AppointmentStatus.TO_PAY
    assert [apt.id for apt in store.pending_requests()] == ["A2"]
    assert notices == []


def test_malformed_record_is_skipped(store, fake_api, notices):
    fake_api.add_appointment("A1", status="confirmed")
    fake_api.add_appointment("A2", status="archived")

    assert store.refresh_appointments() is True

    assert [apt.id for apt in store.appointments] == ["A1"]
    assert notices == []


def test_failed_refresh_marks_cache_stale(store, fake_api):
    store.refresh_appointments()
    assert store.is_stale is False

    fake_api.fail("GET", "/appointments")
    store.refresh_appointments()

    assert store.is_stale is True
