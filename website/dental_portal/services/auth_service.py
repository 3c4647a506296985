import logging
import re

from pydantic import ValidationError as SchemaError

from dental_portal.models.roles import RoleEnum
from dental_portal.models.user import User
from dental_portal.services.errors import ApiError

logger = logging.getLogger(__name__)

EMAIL_REGEX = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"

def is_valid_email(email):
    return re.match(EMAIL_REGEX, email or "") is not None

def _user_from_payload(payload):
    if not isinstance(payload, dict) or not payload.get("user"):
        return None
    try:
        return User.model_validate(payload["user"])
    except SchemaError as e:
        logger.warning(f"Unexpected user payload from the API: {e}")
        return None


class AuthStore:
    """Identity of the signed-in user, as reported by the backend."""

    def __init__(self, api):
        self.api = api
        self.user = None
        self.token = None
        self.is_loading = False

    @property
    def is_authenticated(self):
        return self.user is not None

    def check_auth(self):
        self.is_loading = True
        try:
            payload = self.api.get("/auth/verify")
            self.user = _user_from_payload(payload)
        except ApiError as e:
            logger.info(f"Session verification failed: {e.message}")
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    def login(self, username, password):
        if not (username or "").strip() or not (password or "").strip():
            return None, "Please enter both username and password"

        self.is_loading = True
        try:
            payload = self.api.post("/auth/login", json={"username": username, "password": password})
        except ApiError as e:
            self.user = None
            return None, e.message or "Login failed. Please try again."
        finally:
            self.is_loading = False

        self.user = _user_from_payload(payload)
        if self.user is None:
            return None, "Login failed. Please try again."
        self.token = payload.get("token")
        return self.user, None

    def logout(self):
        try:
            self.api.post("/auth/logout")
        except ApiError as e:
            logger.error(f"Logout error: {e.message}")
        self.user = None
        self.token = None

    def login_to_portal(self, username, password, role):
        """Log in and make sure the account belongs to the portal's role.

        A wrong-portal login is logged out again straight away so no
        half-authenticated session is left behind.
        """
        user, error = self.login(username, password)
        if error:
            return None, error

        verified = self.check_auth()
        if verified is None:
            self.logout()
            return None, "Verification failed. Please try again."

        if verified.role != role:
            logger.warning(f"{verified.username} ({verified.role.value}) tried the {role.value} portal")
            self.logout()
            return None, f"Unauthorized: This portal is for {role.label}s only."

        return verified, None

    def register(self, name, email, phone):
        if not (name or "").strip() or not (phone or "").strip():
            return None, "Name and phone are required."

        if not is_valid_email(email):
            return None, "Invalid email format."

        try:
            payload = self.api.post("/auth/register", json={"name": name, "email": email, "phone": phone})
        except ApiError as e:
            return None, e.message or "Failed to register"

        return (payload or {}).get("data") or {}, None


LOGIN_ENDPOINTS = {
    RoleEnum.ADMIN: "auth.login",
    RoleEnum.DOCTOR: "auth.doctor_login",
    RoleEnum.PATIENT: "auth.patient_login",
}

DASHBOARD_ENDPOINTS = {
    RoleEnum.ADMIN: "admin.dashboard",
    RoleEnum.DOCTOR: "doctor.dashboard",
    RoleEnum.PATIENT: "patient.dashboard",
}
