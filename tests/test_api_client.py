import pytest

from dental_portal.services.api_client import envelope_data
from dental_portal.services.errors import ApiError, NetworkError, ValidationError


def test_get_returns_decoded_envelope(api, fake_api):
    fake_api.add_appointment("A1")

    payload = api.get("/appointments")

    assert payload["success"] is True
    assert envelope_data(payload)[0]["id"] == "A1"


def test_empty_params_are_not_sent(api, fake_api):
    api.get("/appointments", params={"doctor": "Dr. Smith", "search": "", "startDate": None})

    sent = fake_api.requests[-1].url.params
    assert sent.get("doctor") == "Dr. Smith"
    assert "search" not in sent
    assert "startDate" not in sent


def test_error_status_raises_validation_error_with_server_message(api, fake_api):
    fake_api.fail("GET", "/appointments", status=403, message="Forbidden")

    with pytest.raises(ValidationError) as excinfo:
        api.get("/appointments")

    assert excinfo.value.message == "Forbidden"
    assert excinfo.value.status_code == 403


def test_success_false_is_an_error_even_with_200(api, fake_api):
    fake_api.fail("GET", "/appointments", status=200, message="Nope")

    with pytest.raises(ValidationError, match="Nope"):
        api.get("/appointments")


def test_error_without_message_falls_back_to_status(api, fake_api):
    fake_api.fail("GET", "/appointments", status=502, message=None)

    with pytest.raises(ValidationError, match="Request failed with status 502"):
        api.get("/appointments")


def test_transport_failure_raises_network_error(api, fake_api):
    fake_api.offline = True

    with pytest.raises(NetworkError) as excinfo:
        api.get("/appointments")

    assert isinstance(excinfo.value, ApiError)
    assert excinfo.value.status_code is None
    assert excinfo.value.message == "Error connecting to server. Please try again later."


def test_empty_body_decodes_to_none(api, fake_api):
    fake_api.add_notification("N1")

    assert api.delete("/notifications/N1") is None


def test_login_cookie_is_exported(api):
    api.post("/auth/login", json={"username": "admin", "password": "admin123"})

    assert api.export_cookies() == {"session": "admin"}


def test_envelope_data_default():
    assert envelope_data(None, []) == []
    assert envelope_data({"success": True}, {}) == {}
    assert envelope_data({"success": True, "data": [1]}) == [1]
