"""Astrospheric public API client."""

import json
import logging

import httpx

from astroweather.ingest.location import Location

logger = logging.getLogger(__name__)

ASTROSPHERIC_BASE_URL = "https://astrosphericpublicaccess.azurewebsites.net"
FORECAST_ENDPOINT = "/api/GetForecastData_V1"
MAX_ERROR_BODY = 200


class TransportError(Exception):
    """Raised when the forecast request fails before a usable body arrives."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        provider_message: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.provider_message = provider_message


class AstrosphericClient:
    def __init__(
        self,
        base_url: str = ASTROSPHERIC_BASE_URL,
        endpoint: str = FORECAST_ENDPOINT,
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
    ):
        self.base_url = base_url
        self.endpoint = endpoint
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)

    def fetch(self, location: Location, api_key: str) -> bytes:
        """POST the forecast request and return the raw response body.

        Longitude is sent in [-180, 180]. Raises TransportError on connection
        failures, timeouts and non-2xx responses.
        """
        if not api_key:
            raise ValueError("API key must not be empty")

        url = f"{self.base_url}{self.endpoint}"
        payload = {
            "Latitude": location.latitude,
            "Longitude": location.normalized_longitude,
            "APIKey": api_key,
        }
        logger.debug(
            "Sending coordinates to API: Latitude=%.4f, Longitude=%.4f",
            payload["Latitude"], payload["Longitude"],
        )

        try:
            resp = httpx.post(url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.error("Astrospheric request timed out: %s", e)
            raise TransportError(
                f"Request timed out: {e}", error_code=type(e).__name__
            ) from e
        except httpx.RequestError as e:
            logger.error("Astrospheric request failed: %s", e)
            raise TransportError(
                f"Request failed: {e}", error_code=type(e).__name__
            ) from e

        if not resp.is_success:
            provider_message = _extract_error_message(resp)
            logger.error(
                "API request failed: %d - %s", resp.status_code, provider_message
            )
            raise TransportError(
                f"HTTP {resp.status_code}: {provider_message}",
                status_code=resp.status_code,
                provider_message=provider_message,
            )

        logger.debug("API response: %d bytes", len(resp.content))
        return resp.content


def _extract_error_message(resp: httpx.Response) -> str:
    """Pull the provider's error text out of a failed response body."""
    text = resp.text.strip()
    try:
        body = json.loads(text)
    except ValueError:
        return text[:MAX_ERROR_BODY] or resp.reason_phrase
    if isinstance(body, dict):
        for key in ("Message", "message", "error", "Error"):
            if body.get(key):
                return str(body[key])
    return text[:MAX_ERROR_BODY]
