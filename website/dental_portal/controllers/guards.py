from functools import wraps

from flask import g, redirect, url_for

from dental_portal.services.auth_service import DASHBOARD_ENDPOINTS, LOGIN_ENDPOINTS

def role_required(role):
    """Verify the backend session and keep users inside their own portal."""

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            user = g.portal.auth.check_auth()

            if user is None:
                return redirect(url_for(LOGIN_ENDPOINTS[role]))

            if user.role != role:
                return redirect(url_for(DASHBOARD_ENDPOINTS[user.role]))

            return view(*args, **kwargs)

        return wrapped

    return decorator
