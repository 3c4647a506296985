from collections import Counter

from flask import Blueprint, abort, flash, g, redirect, render_template, request, url_for

from dental_portal.controllers.guards import role_required
from dental_portal.controllers.notification_routes import register_notification_routes
from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.models.roles import RoleEnum
from dental_portal.services.payment_modal import PaymentModal
from dental_portal.services.reconciliation_service import apply_status_change

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

@admin_bp.route("/dashboard")
@role_required(RoleEnum.ADMIN)
def dashboard():
    store = g.portal.appointments
    store.refresh_appointments()

    return render_template(
        "portal/dashboard.html",
        portal="admin",
        stale=store.is_stale,
        user=g.portal.user,
        upcoming=store.get_upcoming_appointments(),
        status_counts=Counter(apt.status.value for apt in store.appointments),
        pending_requests=store.pending_requests(),
        appointments_count=len(store.appointments),
    )

# region Appointments
@admin_bp.route("/appointments")
@role_required(RoleEnum.ADMIN)
def appointments():
    store = g.portal.appointments
    filters = {
        key: request.args.get(key)
        for key in ("doctor", "startDate", "endDate", "search")
        if request.args.get(key)
    }
    store.refresh_appointments(filters)

    return render_template(
        "portal/appointments.html",
        portal="admin",
        stale=store.is_stale,
        appointments=store.appointments,
        statuses=[status.value for status in AppointmentStatus],
        filters=filters,
    )

@admin_bp.route("/appointments/<appointment_id>/status", methods=["POST"])
@role_required(RoleEnum.ADMIN)
def update_status(appointment_id):
    status = request.form.get("status")
    if status not in {s.value for s in AppointmentStatus}:
        flash("Unknown appointment status.", "danger")
        return redirect(url_for("admin.appointments"))

    store = g.portal.appointments
    if apply_status_change(store, appointment_id, status, notify=flash):
        store.invalidate()
    return redirect(request.referrer or url_for("admin.appointments"))
# endregion

# region Payments
def _payment_modal(patient_id, payment_id=None):
    appointments = g.portal.appointments
    payments = g.portal.payments

    appointments.refresh_appointments({"patientId": patient_id})
    payments.refresh_payments(patient_id)
    payments.load_payment_methods()

    payment = None
    if payment_id is not None:
        payment = payments.get(payment_id)
        if payment is None:
            abort(404)

    def refresh_patient():
        appointments.invalidate()
        payments.invalidate()

    patient_name = request.args.get("name") or next(
        (apt.patient_name for apt in appointments.appointments if apt.patient_name),
        patient_id,
    )

    modal = PaymentModal(payments, notify=flash, on_success=refresh_patient)
    modal.open(
        patient_id,
        patient_name,
        appointments.appointments,
        appointment_id=request.args.get("appointment_id"),
        payment=payment,
    )
    return modal

def _payment_form(modal):
    if request.method == "POST":
        form = request.form.to_dict()

        if form.get("action") == "pay_in_full":
            form["amount"] = modal.pay_in_full(form.get("appointment_id"))
            return render_template("admin/payment_form.html", modal=modal, form=form)

        patient_id = modal.patient_id
        _, error = modal.submit(form)
        if error:
            return render_template("admin/payment_form.html", modal=modal, form=form), 400

        return redirect(url_for("admin.payments", patient_id=patient_id))

    return render_template("admin/payment_form.html", modal=modal, form=modal.initial_form())

@admin_bp.route("/payments/<patient_id>")
@role_required(RoleEnum.ADMIN)
def payments(patient_id):
    appointments = g.portal.appointments
    store = g.portal.payments
    appointments.refresh_appointments({"patientId": patient_id})
    store.refresh_payments(patient_id)

    return render_template(
        "admin/payments.html",
        patient_id=patient_id,
        appointments=appointments.appointments,
        payments=store.payments,
        stale=appointments.is_stale or store.is_stale,
    )

@admin_bp.route("/payments/<patient_id>/record", methods=["GET", "POST"])
@role_required(RoleEnum.ADMIN)
def record_payment(patient_id):
    return _payment_form(_payment_modal(patient_id))

@admin_bp.route("/payments/<patient_id>/<payment_id>/edit", methods=["GET", "POST"])
@role_required(RoleEnum.ADMIN)
def edit_payment(patient_id, payment_id):
    return _payment_form(_payment_modal(patient_id, payment_id))
# endregion

register_notification_routes(admin_bp, RoleEnum.ADMIN)
