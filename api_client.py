from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from models import Reading
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

READINGS_PATH = "/api/AirQuality"
LOGIN_PATH = "/api/auth/login"
SUBSCRIBE_PATH = "/api/notifications/subscribe"

_REJECTED_LOGIN_STATUSES = {400, 401, 403}


class ApiError(Exception):
    """Raised when the air quality API cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    pass


def _auth_headers(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


class AirQualityClient:
    """Thin HTTP client for the air quality API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = httpx.Client(
            base_url=self._settings.api_base_url,
            timeout=self._settings.api_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_readings(self, token: Optional[str] = None) -> List[Reading]:
        payload = self._request("GET", READINGS_PATH, headers=_auth_headers(token))
        if not isinstance(payload, list):
            raise ApiError("Unexpected response payload when fetching readings.")

        readings: List[Reading] = []
        for record in payload:
            try:
                readings.append(Reading.from_payload(record, self._settings.timezone))
            except (ValueError, AttributeError) as exc:
                logger.warning(
                    "Skipping reading with invalid timestamp",
                    extra={"reason": str(exc)},
                )
        logger.info(
            "Fetched readings",
            extra={"endpoint": READINGS_PATH, "reading_count": len(readings)},
        )
        return readings

    def login(self, email: str, password: str) -> str:
        try:
            payload = self._request("POST", LOGIN_PATH, json={"email": email, "password": password})
        except ApiError as exc:
            if exc.status_code not in _REJECTED_LOGIN_STATUSES:
                raise
            raise AuthenticationError("Invalid email or password.", exc.status_code) from exc
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Login response did not contain a token.")
        return token

    def subscribe_notifications(self, token: str, email: str) -> None:
        self._request(
            "POST",
            SUBSCRIBE_PATH,
            json={"email": email},
            headers=_auth_headers(token),
        )

    def submit_reading(self, reading: Reading, token: Optional[str] = None) -> Any:
        return self._request(
            "POST",
            READINGS_PATH,
            json=reading.to_payload(),
            headers=_auth_headers(token),
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(
                "API request rejected",
                extra={"endpoint": path, "status_code": status_code},
            )
            raise ApiError(
                f"Request failed with status {status_code}: {_error_detail(exc.response)}",
                status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("API request failed", extra={"endpoint": path, "reason": str(exc)})
            raise ApiError(f"Could not reach the air quality API: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or "no detail provided."
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("message") or data.get("title")
        if detail:
            return str(detail)
    return response.text.strip() or "no detail provided."
