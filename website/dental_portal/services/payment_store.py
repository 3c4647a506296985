import logging

from pydantic import ValidationError as SchemaError

from dental_portal.models.base import parse_records
from dental_portal.models.payment import DEFAULT_PAYMENT_METHODS, Payment
from dental_portal.services.api_client import envelope_data
from dental_portal.services.errors import ApiError
from dental_portal.services.notify import discard

logger = logging.getLogger(__name__)


def _method_name(item):
    if isinstance(item, dict):
        return item.get("name") or item.get("method")
    return item


class PaymentStore:
    def __init__(self, api, notify=None):
        self.api = api
        self.notify = notify or discard
        self.payments = []
        self.payment_methods = list(DEFAULT_PAYMENT_METHODS)
        self.patient_id = None
        self.is_loading = False
        self.is_stale = True

    def get(self, payment_id):
        return next((p for p in self.payments if p.id == str(payment_id)), None)

    def for_appointment(self, appointment_id):
        return [p for p in self.payments if p.appointment_id == str(appointment_id)]

    def load_payment_methods(self):
        """Fetch the method catalogue; the built-in list stays in place on failure."""
        try:
            payload = self.api.get("/payment-methods")
        except ApiError as e:
            logger.error(f"Error fetching payment methods: {e.message}")
            return self.payment_methods

        names = [_method_name(item) for item in envelope_data(payload, [])]
        names = [name for name in names if name in DEFAULT_PAYMENT_METHODS]
        if names:
            self.payment_methods = names
        return self.payment_methods

    def refresh_payments(self, patient_id=None):
        if patient_id is not None:
            self.patient_id = str(patient_id)
        if not self.patient_id:
            return False

        self.is_loading = True
        self.is_stale = True
        try:
            payload = self.api.get(f"/payments/patient/{self.patient_id}")
        except ApiError as e:
            logger.error(f"Error loading payments for patient {self.patient_id}: {e.message}")
            self.notify("Failed to load payments", "danger")
            return False
        finally:
            self.is_loading = False

        self.payments = parse_records(Payment.model_validate, envelope_data(payload, []))
        self.is_stale = False
        return True

    def invalidate(self):
        self.is_stale = True
        return self.refresh_payments()

    def record_payment(self, body):
        """POST a new payment. Returns ``(payment, error)``."""
        try:
            payload = self.api.post("/payments", json=body)
        except ApiError as e:
            logger.error(f"Error recording payment for appointment {body.get('appointmentId')}: {e.message}")
            return None, e.message or "Failed to record payment"
        return self._remember(envelope_data(payload)), None

    def edit_payment(self, payment_id, body):
        """PUT an edited payment. Returns ``(payment, error)``."""
        try:
            payload = self.api.put(f"/payments/{payment_id}", json=body)
        except ApiError as e:
            logger.error(f"Error updating payment {payment_id}: {e.message}")
            return None, e.message or "Failed to update payment"
        return self._remember(envelope_data(payload)), None

    def _remember(self, data):
        if not isinstance(data, dict):
            return None
        try:
            payment = Payment.model_validate(data)
        except SchemaError as e:
            logger.warning(f"Unexpected payment payload from the API: {e}")
            return None
        self.payments = [p for p in self.payments if p.id != payment.id] + [payment]
        return payment
