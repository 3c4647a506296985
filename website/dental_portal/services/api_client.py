"""HTTP client for the clinic REST API.

Every response follows the envelope ``{success, data?, message?}``. A non-2xx
status or ``success: false`` is raised as ``ValidationError``; transport
failures are raised as ``NetworkError``.
"""

import logging

import httpx

from dental_portal.services.errors import NetworkError, ValidationError

logger = logging.getLogger(__name__)


class ClinicApiClient:
    def __init__(self, base_url, cookies=None, transport=None):
        self.base_url = base_url.rstrip("/")
        # No explicit timeout: the transport default applies.
        self._client = httpx.Client(
            base_url=self.base_url,
            cookies=cookies,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self):
        if not self._client.is_closed:
            self._client.close()

    def export_cookies(self):
        """Backend session cookies, in a form that fits in the Flask session."""
        return {cookie.name: cookie.value for cookie in self._client.cookies.jar}

    def request(self, method, path, params=None, json=None):
        params = {key: value for key, value in (params or {}).items() if value not in (None, "")}

        try:
            response = self._client.request(method, path, params=params or None, json=json)
        except httpx.RequestError as e:
            logger.error(f"Request error calling {method} {path}: {e}")
            raise NetworkError("Error connecting to server. Please try again later.") from e

        payload = self._decode(response)

        if response.is_error or (isinstance(payload, dict) and payload.get("success") is False):
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning(f"{method} {path} rejected with status {response.status_code}: {message}")
            raise ValidationError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        return payload

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, json=None, params=None):
        return self.request("POST", path, params=params, json=json)

    def put(self, path, json=None, params=None):
        return self.request("PUT", path, params=params, json=json)

    def delete(self, path, params=None):
        return self.request("DELETE", path, params=params)

    @staticmethod
    def _decode(response):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None


def envelope_data(payload, default=None):
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return default
