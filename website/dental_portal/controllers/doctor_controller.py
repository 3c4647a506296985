from datetime import date, timedelta

from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from dental_portal.controllers.guards import role_required
from dental_portal.controllers.notification_routes import register_notification_routes
from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.models.roles import RoleEnum
from dental_portal.services.reconciliation_service import apply_status_change

doctor_bp = Blueprint("doctor", __name__, url_prefix="/doctor")

REQUEST_DECISIONS = {AppointmentStatus.CONFIRMED.value, AppointmentStatus.CANCELLED.value}

@doctor_bp.route("/dashboard")
@role_required(RoleEnum.DOCTOR)
def dashboard():
    store = g.portal.appointments
    store.refresh_appointments()
    today = date.today()

    return render_template(
        "portal/dashboard.html",
        portal="doctor",
        stale=store.is_stale,
        user=g.portal.user,
        upcoming=store.get_upcoming_appointments(doctor=g.portal.user.display_name),
        todays=store.get_appointments_by_date(today),
        appointments_count=len(store.appointments),
    )

# region Appointments
@doctor_bp.route("/appointments")
@role_required(RoleEnum.DOCTOR)
def appointments():
    store = g.portal.appointments
    start = request.args.get("startDate") or date.today().isoformat()
    end = request.args.get("endDate") or (date.today() + timedelta(days=30)).isoformat()

    store.refresh_appointments(dict(store.filters, startDate=start, endDate=end))

    return render_template(
        "portal/appointments.html",
        portal="doctor",
        stale=store.is_stale,
        appointments=store.appointments,
        start_date=start,
        end_date=end,
    )

@doctor_bp.route("/requests")
@role_required(RoleEnum.DOCTOR)
def appointment_requests():
    store = g.portal.appointments
    store.refresh_appointments()

    return render_template("doctor/requests.html", requests=store.pending_requests(), stale=store.is_stale)

@doctor_bp.route("/requests/<appointment_id>", methods=["POST"])
@role_required(RoleEnum.DOCTOR)
def decide_request(appointment_id):
    status = request.form.get("status")
    if status not in REQUEST_DECISIONS:
        flash("Unknown appointment action.", "danger")
        return redirect(url_for("doctor.appointment_requests"))

    store = g.portal.appointments
    if apply_status_change(store, appointment_id, status, notify=flash):
        store.invalidate()
    return redirect(url_for("doctor.appointment_requests"))
# endregion

register_notification_routes(doctor_bp, RoleEnum.DOCTOR)
