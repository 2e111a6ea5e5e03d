"""
Thin client for the Geoapify Places and Geocoding APIs.

Connection errors and timeouts are retried (tenacity); any non-2xx answer is
raised as UpstreamError so the worker can log it and move on.
"""

import logging

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from clients_finder.core.config import settings
from clients_finder.core.errors import ConfigurationError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


class GeoapifyClient:
    def __init__(self, api_key: str = None):
        self.api_key = api_key or settings.GEOAPIFY_API_KEY
        self.places_url = settings.GEOAPIFY_PLACES_URL
        self.geocode_url = settings.GEOAPIFY_GEOCODE_URL

    def _require_key(self):
        if not self.api_key:
            raise ConfigurationError("Geoapify API key not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    def _get(self, url: str, params: dict) -> requests.Response:
        return requests.get(url, params=params, timeout=30)

    def _get_json(self, url: str, params: dict) -> dict:
        try:
            resp = self._get(url, params)
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"Geoapify request failed: {e}") from e

        if not resp.ok:
            raise UpstreamError(f"Geoapify API error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError("Geoapify returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError("Geoapify returned an unexpected payload")
        return data

    def fetch_places(self, category: str, lat: float, lon: float, radius, limit: int, offset: int) -> list[dict]:
        """One page of places inside a circle. Returns the GeoJSON `features` list."""
        self._require_key()

        params = {
            "categories": category,
            "filter": f"circle:{lon},{lat},{radius}",
            "limit": limit,
            "offset": offset,
            "apiKey": self.api_key,
        }
        data = self._get_json(self.places_url, params)
        return data.get("features") or []

    def geocode(self, address: str) -> dict:
        self._require_key()

        data = self._get_json(self.geocode_url, {"text": address, "apiKey": self.api_key})
        features = data.get("features") or []
        if not features:
            raise NotFoundError(f"Could not geocode address: {address}")

        props = features[0].get("properties", {})
        return {
            "lat": props.get("lat"),
            "lon": props.get("lon"),
            "formatted": props.get("formatted") or address,
        }
