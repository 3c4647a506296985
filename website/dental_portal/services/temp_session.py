"""Guest ("temporary") patient session used after booking without an account.

The session is mirrored in two places: the Flask session, which ends with the
browser session, and a signed long-lived cookie. Reads prefer the cookie.
"""

import json
import logging
from datetime import datetime, timezone

from itsdangerous import BadSignature, URLSafeSerializer
from pydantic import ValidationError as SchemaError

from dental_portal.models.temp_patient_session import TempPatientSession

logger = logging.getLogger(__name__)

SESSION_KEY = "tempPatientSession"


class TempSessionStore:
    def __init__(self, session, cookies, secret_key, ttl_hours=24, cookie_name=SESSION_KEY):
        self.session = session
        self.cookies = cookies
        self.ttl_hours = ttl_hours
        self.cookie_name = cookie_name
        self._serializer = URLSafeSerializer(secret_key, salt="temp-patient-session")

    def save(self, temp_session):
        """Store the session and return the signed value for the long-lived cookie."""
        data = temp_session.to_api()
        self.session[SESSION_KEY] = json.dumps(data)
        return self._serializer.dumps(data)

    def load(self):
        signed = self.cookies.get(self.cookie_name)
        if signed:
            try:
                return TempPatientSession.model_validate(self._serializer.loads(signed))
            except (BadSignature, SchemaError) as e:
                logger.error(f"[TEMP SESSION] Error retrieving session from cookie: {e}")

        raw = self.session.get(SESSION_KEY)
        if raw:
            try:
                return TempPatientSession.model_validate_json(raw)
            except SchemaError as e:
                logger.error(f"[TEMP SESSION] Error retrieving session: {e}")
        return None

    def clear(self):
        self.session.pop(SESSION_KEY, None)

    def is_temporarily_logged_in(self):
        temp_session = self.load()
        return temp_session is not None and temp_session.is_temporary_login

    def patient_name(self):
        temp_session = self.load()
        return temp_session.full_name if temp_session else ""

    def is_expired(self, now=None):
        temp_session = self.load()
        if temp_session is None:
            return True

        now = now or datetime.now(timezone.utc)
        login_time = temp_session.login_time
        if login_time.tzinfo is None:
            login_time = login_time.replace(tzinfo=timezone.utc)
        hours_elapsed = (now - login_time).total_seconds() / 3600
        return hours_elapsed > self.ttl_hours
