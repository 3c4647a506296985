"""
Shared pytest fixtures.

The clinic backend is replaced by ``FakeClinicApi``, an in-memory imitation of
the REST API mounted on ``httpx.MockTransport``. It records every call so
tests can assert what was (and was not) sent.
"""

import json
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from dental_portal import create_app
from dental_portal.config import TestConfig
from dental_portal.services.api_client import ClinicApiClient

BASE_URL = TestConfig.API_BASE_URL


def _ok(data=None, status=200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return httpx.Response(status, json=body)


def _error(status, message):
    return httpx.Response(status, json={"success": False, "message": message})


class FakeClinicApi:
    def __init__(self):
        self.users = {
            "admin": {"password": "admin123", "user": {"username": "admin", "role": "admin"}},
            "drsmith": {
                "password": "doctor123",
                "user": {"username": "drsmith", "role": "doctor", "name": "Dr. Smith", "staffId": "S1"},
            },
            "jane": {
                "password": "patient123",
                "user": {"username": "jane", "role": "patient", "name": "Jane Doe", "patientId": "P1"},
            },
        }
        self.appointments = {}
        self.notifications = {}
        self.payments = {}
        self.payment_methods = ["Cash", "Credit Card", "Insurance"]
        self.bookings = []
        self.session_user = None
        self.calls = []
        self.requests = []
        self.failures = {}
        self.offline = False

    # region Seeding
    def add_appointment(self, appointment_id, **fields):
        record = {
            "id": appointment_id,
            "patientId": "P1",
            "patientName": "Jane Doe",
            "doctor": "Dr. Smith",
            "date": (date.today() + timedelta(days=3)).isoformat(),
            "time": "09:00",
            "duration": 30,
            "type": "Cleaning",
            "status": "pending",
            "price": 150.0,
            "paymentStatus": "unpaid",
            "totalPaid": 0.0,
            "notes": "",
        }
        record.update(fields)
        self.appointments[appointment_id] = record
        return record

    def add_notification(self, notification_id, user_id="admin", **fields):
        record = {
            "id": notification_id,
            "userId": user_id,
            "type": "appointment",
            "title": "New appointment request",
            "message": "Jane Doe requested an appointment",
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "isRead": False,
            "metadata": None,
        }
        record.update(fields)
        self.notifications[notification_id] = record
        return record

    def add_payment(self, payment_id, **fields):
        record = {
            "id": payment_id,
            "appointmentId": "A1",
            "patientId": "P1",
            "amount": 50.0,
            "method": "Cash",
            "date": date.today().isoformat(),
            "transactionId": "T-ABC1234",
            "notes": "",
        }
        record.update(fields)
        self.payments[payment_id] = record
        return record
    # endregion

    def fail(self, method, path, status=500, message="Internal server error"):
        self.failures[(method, path)] = (status, message)

    def count(self, method, path):
        return self.calls.count((method, path))

    def transport(self):
        return httpx.MockTransport(self.handler)

    def handler(self, request):
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        method = request.method
        self.calls.append((method, path))
        self.requests.append(request)

        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)

        if (method, path) in self.failures:
            return _error(*self.failures[(method, path)])

        body = json.loads(request.content) if request.content else {}
        params = request.url.params
        segments = path.strip("/").split("/")

        if segments[0] == "auth":
            return self._auth(method, segments[1], body)
        if segments[0] == "appointments":
            return self._appointments(method, segments, body, params)
        if segments[0] == "notifications":
            return self._notifications(method, segments, body, params)
        if segments[0] == "payment-methods":
            return _ok(self.payment_methods)
        if segments[0] == "payments":
            return self._payments(method, segments, body)
        return _error(404, "Not found")

    def _auth(self, method, action, body):
        if action == "verify":
            if self.session_user is None:
                return httpx.Response(401, json={"message": "Not authenticated"})
            return httpx.Response(200, json={"user": self.users[self.session_user]["user"]})

        if action == "login":
            account = self.users.get(body.get("username"))
            if account is None or account["password"] != body.get("password"):
                return _error(401, "Invalid username or password")
            self.session_user = body["username"]
            return httpx.Response(
                200,
                json={"user": account["user"], "token": f"tok-{body['username']}"},
                headers={"set-cookie": f"session={body['username']}; Path=/"},
            )

        if action == "logout":
            self.session_user = None
            return _ok()

        if action == "register":
            return _ok({"id": "P9", **body}, status=201)

        return _error(404, "Not found")

    def _appointments(self, method, segments, body, params):
        if method == "GET" and len(segments) == 1:
            records = list(self.appointments.values())
            if params.get("patientId"):
                records = [r for r in records if r["patientId"] == params["patientId"]]
            if params.get("doctor"):
                records = [r for r in records if r["doctor"] == params["doctor"]]
            return _ok(records)

        if method == "POST" and segments[1:] == ["public-book"]:
            self.bookings.append(body)
            return _ok({"id": f"B{len(self.bookings)}", **body}, status=201)

        if method == "PUT" and len(segments) == 2:
            record = self.appointments.get(segments[1])
            if record is None:
                return _error(404, "Appointment not found")
            record.update(body)
            if "status" in body:
                for notification in self.notifications.values():
                    metadata = notification.get("metadata") or {}
                    if metadata.get("appointmentId") == record["id"]:
                        metadata["currentStatus"] = body["status"]
            return _ok(record)

        return _error(404, "Not found")

    def _notifications(self, method, segments, body, params):
        if method == "GET" and len(segments) == 1:
            user_id = params.get("userId")
            return _ok([n for n in self.notifications.values() if n["userId"] == user_id])

        if method == "PUT" and segments[1:] == ["mark-all-read"]:
            for notification in self.notifications.values():
                if notification["userId"] == params.get("userId"):
                    notification["isRead"] = True
            return _ok()

        record = self.notifications.get(segments[1]) if len(segments) == 2 else None
        if record is None:
            return _error(404, "Notification not found")

        if method == "PUT":
            record["isRead"] = bool(body.get("isRead"))
            return _ok(record)
        if method == "DELETE":
            del self.notifications[segments[1]]
            return httpx.Response(204)
        return _error(404, "Not found")

    def _payments(self, method, segments, body):
        if method == "GET" and segments[1:2] == ["patient"]:
            return _ok([p for p in self.payments.values() if p["patientId"] == segments[2]])

        if method == "POST" and len(segments) == 1:
            payment_id = f"PAY{len(self.payments) + 1}"
            appointment = self.appointments.get(body.get("appointmentId"), {})
            record = {"id": payment_id, "patientId": appointment.get("patientId"), **body}
            self.payments[payment_id] = record
            if appointment:
                appointment["totalPaid"] = appointment.get("totalPaid", 0) + body["amount"]
            return _ok(record, status=201)

        if method == "PUT" and len(segments) == 2:
            record = self.payments.get(segments[1])
            if record is None:
                return _error(404, "Payment not found")
            appointment = self.appointments.get(record["appointmentId"], {})
            if appointment:
                appointment["totalPaid"] = appointment.get("totalPaid", 0) - record["amount"] + body["amount"]
            record.update(body)
            return _ok(record)

        return _error(404, "Not found")


@pytest.fixture
def fake_api():
    return FakeClinicApi()


@pytest.fixture
def api(fake_api):
    client = ClinicApiClient(BASE_URL, transport=fake_api.transport())
    yield client
    client.close()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def notify(notices):
    def _notify(message, category="message"):
        notices.append((category, message))

    return _notify


@pytest.fixture
def app(fake_api):
    return create_app(TestConfig, transport=fake_api.transport())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(path, username, password, follow_redirects=False):
        return client.post(
            path,
            data={"username": username, "password": password},
            follow_redirects=follow_redirects,
        )

    return _login
