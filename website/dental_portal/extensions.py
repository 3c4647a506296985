from flask import current_app, flash, g, session

from dental_portal.services.portal_context import PortalContext

API_COOKIES_KEY = "api_cookies"

class ClinicApi:
    """Opens a PortalContext for every request and closes it afterwards.

    The backend session cookie travels in the Flask session between requests.
    """

    def __init__(self, app=None, transport=None):
        self.transport = transport
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.extensions["clinic_api"] = self
        app.before_request(self._open_context)
        app.after_request(self._store_cookies)
        app.teardown_request(self._close_context)

    def _open_context(self):
        g.portal = PortalContext.open(
            current_app.config["API_BASE_URL"],
            cookies=session.get(API_COOKIES_KEY),
            transport=self.transport,
            notify=flash,
        )

    def _store_cookies(self, response):
        portal = g.get("portal")
        if portal is not None:
            cookies = portal.api.export_cookies()
            if cookies != session.get(API_COOKIES_KEY):
                session[API_COOKIES_KEY] = cookies
        return response

    def _close_context(self, exc):
        portal = g.pop("portal", None)
        if portal is not None:
            portal.close()
