"""Shared state behind the record-payment and edit-payment forms.

Whether a payment record was loaded into the modal decides the flow: without
one the form creates a new payment with a fresh transaction id, with one it
edits that record and keeps its transaction id.
"""

import logging
import math
import random
import string
from datetime import date

from dental_portal.models.payment import DEFAULT_PAYMENT_METHODS
from dental_portal.services.notify import discard

logger = logging.getLogger(__name__)

TRANSACTION_ID_ALPHABET = string.digits + string.ascii_uppercase
AMOUNT_EXCEEDS_BALANCE = "Amount exceeds outstanding balance"


def generate_transaction_id():
    return "T-" + "".join(random.choices(TRANSACTION_ID_ALPHABET, k=7))


def format_amount(value):
    return f"{value:.2f}"


def parse_amount(raw):
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    # nan and inf are not amounts
    return value if math.isfinite(value) else 0.0


def validate_payment_form(method, amount, appointment_id, outstanding_balance=None, methods=None):
    """Check a payment form before it is submitted.

    Returns ``(amount, None)`` when the form may be sent, otherwise
    ``(None, error_message)``.
    """
    methods = methods or DEFAULT_PAYMENT_METHODS
    if not method or method not in methods:
        return None, "Select payment method"

    value = parse_amount(amount)
    if value <= 0:
        return None, "Enter a valid amount"

    if not appointment_id:
        return None, "Select an appointment"

    if outstanding_balance is not None and outstanding_balance > 0:
        if round(value, 2) > round(outstanding_balance, 2):
            return None, AMOUNT_EXCEEDS_BALANCE

    return value, None


class PaymentModal:
    def __init__(self, store, notify=None, on_success=None):
        self.store = store
        self.notify = notify or discard
        self.on_success = on_success
        self.close()

    def open(self, patient_id, patient_name, appointments, appointment_id=None, payment=None):
        self.is_open = True
        self.patient_id = patient_id
        self.patient_name = patient_name
        self.appointments = list(appointments or [])
        self.appointment_id = appointment_id
        self.payment = payment

    def close(self):
        self.is_open = False
        self.patient_id = None
        self.patient_name = None
        self.appointments = []
        self.appointment_id = None
        self.payment = None

    @property
    def is_edit(self):
        return self.payment is not None

    def selected_appointment(self, appointment_id=None):
        appointment_id = appointment_id or self.appointment_id
        if not appointment_id and self.payment is not None:
            appointment_id = self.payment.appointment_id
        return next((apt for apt in self.appointments if apt.id == str(appointment_id)), None)

    def outstanding_balance(self, appointment_id=None):
        appointment = self.selected_appointment(appointment_id)
        if appointment is None:
            return 0.0

        balance = appointment.outstanding_balance
        # the edited payment is already counted in totalPaid
        if self.payment is not None and self.payment.appointment_id == appointment.id:
            balance += self.payment.amount
        return balance

    def pay_in_full(self, appointment_id=None):
        return format_amount(self.outstanding_balance(appointment_id))

    def initial_form(self):
        if self.payment is None:
            return {
                "appointment_id": self.appointment_id or "",
                "method": "",
                "amount": "",
                "date": date.today().isoformat(),
                "notes": "",
            }

        return {
            "appointment_id": self.payment.appointment_id or "",
            "method": self.payment.method.value,
            "amount": str(self.payment.amount) if self.payment.amount else "",
            "date": self.payment.date.isoformat() if self.payment.date else "",
            "transaction_id": self.payment.transaction_id or "",
            "notes": self.payment.notes or "",
        }

    def submit(self, form):
        """Validate and send the form. Returns ``(payment, error)``."""
        appointment_id = form.get("appointment_id") or self.appointment_id
        amount, error = validate_payment_form(
            form.get("method"),
            form.get("amount"),
            appointment_id,
            outstanding_balance=self.outstanding_balance(appointment_id),
            methods=self.store.payment_methods,
        )
        if error:
            self.notify(error, "warning" if error == AMOUNT_EXCEEDS_BALANCE else "danger")
            return None, error

        body = {
            "appointmentId": appointment_id,
            "amount": amount,
            "method": form.get("method"),
            "date": form.get("date") or date.today().isoformat(),
            "notes": form.get("notes") or "",
        }

        if self.is_edit:
            body["transactionId"] = self.payment.transaction_id or ""
            payment, error = self.store.edit_payment(self.payment.id, body)
            success_message = "Payment updated successfully"
        else:
            body["transactionId"] = generate_transaction_id()
            payment, error = self.store.record_payment(body)
            success_message = "Payment recorded"

        if error:
            self.notify(error, "danger")
            return None, error

        logger.info(f"Payment {body['transactionId']} saved for appointment {appointment_id}")
        if self.on_success is not None:
            self.on_success()
        self.close()
        self.notify(success_message, "success")
        return payment, None
