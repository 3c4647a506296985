from flask import Blueprint, flash, g, redirect, render_template, url_for

from dental_portal.controllers.guards import role_required
from dental_portal.controllers.notification_routes import register_notification_routes
from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.models.roles import RoleEnum
from dental_portal.services.reconciliation_service import apply_status_change

patient_bp = Blueprint("patient", __name__, url_prefix="/patient")

CANCELLABLE = {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED, AppointmentStatus.SCHEDULED}

@patient_bp.route("/dashboard")
@role_required(RoleEnum.PATIENT)
def dashboard():
    store = g.portal.appointments
    store.refresh_appointments()

    return render_template(
        "portal/dashboard.html",
        portal="patient",
        stale=store.is_stale,
        user=g.portal.user,
        upcoming=store.get_upcoming_appointments(),
        appointments_count=len(store.appointments),
    )

# region Appointments
@patient_bp.route("/appointments")
@role_required(RoleEnum.PATIENT)
def appointments():
    store = g.portal.appointments
    store.refresh_appointments()

    return render_template(
        "portal/appointments.html",
        portal="patient",
        stale=store.is_stale,
        appointments=store.appointments,
        cancellable=CANCELLABLE,
    )

@patient_bp.route("/appointments/<appointment_id>/cancel", methods=["POST"])
@role_required(RoleEnum.PATIENT)
def request_cancellation(appointment_id):
    store = g.portal.appointments
    store.refresh_appointments()
    appointment = store.get(appointment_id)

    if appointment is None:
        flash("Appointment not found.", "danger")
        return redirect(url_for("patient.appointments"))

    if appointment.status not in CANCELLABLE:
        flash("This appointment can no longer be cancelled.", "warning")
        return redirect(url_for("patient.appointments"))

    # staff confirm the cancellation; until then the appointment is tentative
    if apply_status_change(store, appointment_id, AppointmentStatus.TENTATIVE, notify=flash):
        store.invalidate()
    return redirect(url_for("patient.appointments"))
# endregion

register_notification_routes(patient_bp, RoleEnum.PATIENT)
