from dental_portal.models.roles import RoleEnum
from dental_portal.services.api_client import ClinicApiClient
from dental_portal.services.appointment_store import AppointmentStore
from dental_portal.services.auth_service import AuthStore
from dental_portal.services.notification_store import NotificationStore
from dental_portal.services.payment_store import PaymentStore


def appointment_filters_for(user):
    if user is None or user.role == RoleEnum.ADMIN:
        return {}
    if user.role == RoleEnum.PATIENT:
        return {"patientId": user.patient_id or user.username}
    return {"doctor": user.display_name}


class PortalContext:
    """The API client and the stores for one unit of work.

    Built at the start of a request (or a test) and closed at its end. The
    appointment and notification stores are scoped to the signed-in user, so
    they are created on first use, after authentication.
    """

    def __init__(self, api, notify=None):
        self.api = api
        self.notify = notify
        self.auth = AuthStore(api)
        self.payments = PaymentStore(api, notify)
        self._appointments = None
        self._notifications = None

    @classmethod
    def open(cls, base_url, cookies=None, transport=None, notify=None):
        return cls(ClinicApiClient(base_url, cookies=cookies, transport=transport), notify=notify)

    @property
    def user(self):
        return self.auth.user

    @property
    def appointments(self):
        if self._appointments is None:
            self._appointments = AppointmentStore(self.api, self.notify, appointment_filters_for(self.user))
        return self._appointments

    @property
    def notifications(self):
        if self._notifications is None:
            user_id = self.user.actor_id if self.user else None
            self._notifications = NotificationStore(self.api, user_id, self.notify)
        return self._notifications

    def close(self):
        self.api.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
