from flask import Blueprint, flash, g, redirect, render_template, request, session, url_for

from dental_portal.models.roles import RoleEnum
from dental_portal.services.auth_service import DASHBOARD_ENDPOINTS, LOGIN_ENDPOINTS

auth_bp = Blueprint("auth", __name__)

PORTAL_TITLES = {
    RoleEnum.ADMIN: "Admin Dashboard Login",
    RoleEnum.DOCTOR: "Doctor Portal Login",
    RoleEnum.PATIENT: "Patient Portal Login",
}

def _portal_login(role):
    if request.method == "POST":
        user, error = g.portal.auth.login_to_portal(
            request.form.get("username", ""),
            request.form.get("password", ""),
            role,
        )

        if error:
            flash(error, "danger")
            return render_template(
                "auth/login.html",
                title=PORTAL_TITLES[role],
                action=url_for(LOGIN_ENDPOINTS[role]),
                form=request.form,
                hide_navbar=True,
            ), 401

        session.pop("unseen_notifications", None)
        flash(f"{role.label} login successful!", "success")
        return redirect(url_for(DASHBOARD_ENDPOINTS[role]))

    return render_template(
        "auth/login.html",
        title=PORTAL_TITLES[role],
        action=url_for(LOGIN_ENDPOINTS[role]),
        form={},
        hide_navbar=True,
    )

@auth_bp.route("/")
def index():
    return redirect(url_for("booking.book"))

@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    return _portal_login(RoleEnum.ADMIN)

@auth_bp.route("/doctor/login", methods=["GET", "POST"])
def doctor_login():
    return _portal_login(RoleEnum.DOCTOR)

@auth_bp.route("/patient/login", methods=["GET", "POST"])
def patient_login():
    return _portal_login(RoleEnum.PATIENT)

@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        _, error = g.portal.auth.register(
            name=request.form.get("name", ""),
            email=request.form.get("email", ""),
            phone=request.form.get("phone", ""),
        )

        if error:
            flash(error, "danger")
            return render_template("auth/register.html", form=request.form, hide_navbar=True), 400

        flash("Registration successful! You can now log in with your credentials and default password.", "success")
        return redirect(url_for("auth.patient_login"))

    return render_template("auth/register.html", form={}, hide_navbar=True)

@auth_bp.route("/logout", methods=["GET", "POST"])
def logout():
    g.portal.auth.logout()
    session.clear()
    return redirect(url_for("auth.login"))
