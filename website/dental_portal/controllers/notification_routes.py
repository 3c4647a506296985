from flask import flash, g, redirect, render_template, request, session, url_for

from dental_portal.controllers.guards import role_required
from dental_portal.models.appointment_status import AppointmentStatus
from dental_portal.models.roles import RoleEnum
from dental_portal.services.notification_store import FILTERS
from dental_portal.services.reconciliation_service import resolve_notification_action

def _remember_unseen(store):
    session["unseen_notifications"] = store.unread_count

def register_notification_routes(bp, role):
    """Inbox pages shared by the patient, doctor and admin portals."""

    def back_to_inbox():
        return redirect(url_for(f"{bp.name}.notifications", filter=request.args.get("filter", "all")))

    @bp.route("/notifications")
    @role_required(role)
    def notifications():
        store = g.portal.notifications
        store.refresh_notifications()
        _remember_unseen(store)

        selected = request.args.get("filter", "all")
        # staff inboxes can also be narrowed to appointments or payments
        filters = FILTERS if role != RoleEnum.PATIENT else ("all", "unread")
        if selected not in filters:
            selected = "all"

        new, earlier = store.split_by_age(store.filtered(selected))
        return render_template(
            "portal/notifications.html",
            portal=bp.name,
            stale=store.is_stale,
            filters=filters,
            selected=selected,
            new_notifications=new,
            earlier_notifications=earlier,
        )

    @bp.route("/notifications/read/<notification_id>", methods=["POST"])
    @role_required(role)
    def mark_notification_read(notification_id):
        g.portal.notifications.mark_as_read(notification_id)
        return back_to_inbox()

    @bp.route("/notifications/delete/<notification_id>", methods=["POST"])
    @role_required(role)
    def delete_notification(notification_id):
        g.portal.notifications.delete_notification(notification_id)
        return back_to_inbox()

    @bp.route("/notifications/read-all", methods=["POST"])
    @role_required(role)
    def mark_all_notifications_read():
        store = g.portal.notifications
        if store.mark_all_as_read():
            session["unseen_notifications"] = 0
        return back_to_inbox()

    @bp.route("/notifications/action/<notification_id>", methods=["POST"])
    @role_required(role)
    def notification_action(notification_id):
        appointment_id = request.form.get("appointment_id")
        status = request.form.get("status")

        if not appointment_id or status not in {s.value for s in AppointmentStatus}:
            flash("Unknown appointment action.", "danger")
            return back_to_inbox()

        portal = g.portal
        if resolve_notification_action(
            portal.appointments,
            portal.notifications,
            appointment_id,
            status,
            notification_id,
            notify=flash,
        ):
            _remember_unseen(portal.notifications)
        return back_to_inbox()
