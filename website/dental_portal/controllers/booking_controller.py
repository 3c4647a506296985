from flask import Blueprint, current_app, flash, g, make_response, redirect, render_template, request, session, url_for

from dental_portal.services.booking_service import book_public_appointment
from dental_portal.services.temp_session import TempSessionStore

booking_bp = Blueprint("booking", __name__, url_prefix="/book")

def _temp_sessions():
    return TempSessionStore(
        session,
        request.cookies,
        current_app.config["SECRET_KEY"],
        ttl_hours=current_app.config["TEMP_SESSION_TTL_HOURS"],
        cookie_name=current_app.config["TEMP_SESSION_COOKIE"],
    )

def _forget(response):
    _temp_sessions().clear()
    response.delete_cookie(current_app.config["TEMP_SESSION_COOKIE"])
    return response

@booking_bp.route("", methods=["GET"])
def book():
    temp_sessions = _temp_sessions()
    guest = None if temp_sessions.is_expired() else temp_sessions.load()

    form = {}
    if guest is not None:
        form = {
            "firstName": guest.first_name,
            "lastName": guest.last_name,
            "email": guest.email,
            "phone": guest.phone,
        }
    return render_template("booking/book.html", form=form, guest=guest)

@booking_bp.route("", methods=["POST"])
def submit_booking():
    temp_session, error = book_public_appointment(g.portal.api, request.form)

    if error:
        flash(error, "danger")
        return render_template("booking/book.html", form=request.form, guest=None), 400

    flash("Appointment request sent successfully!", "success")
    response = make_response(redirect(url_for("booking.confirmation")))
    response.set_cookie(
        current_app.config["TEMP_SESSION_COOKIE"],
        _temp_sessions().save(temp_session),
        max_age=current_app.config["TEMP_SESSION_TTL_HOURS"] * 3600,
        httponly=True,
        samesite="Lax",
    )
    return response

@booking_bp.route("/confirmation")
def confirmation():
    temp_sessions = _temp_sessions()

    if temp_sessions.is_expired():
        return _forget(make_response(redirect(url_for("booking.book"))))

    return render_template("booking/confirmation.html", guest=temp_sessions.load())

@booking_bp.route("/forget", methods=["POST"])
def forget():
    return _forget(make_response(redirect(url_for("booking.book"))))
