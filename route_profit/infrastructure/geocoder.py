"""
City geocoding through an OpenStreetMap Nominatim-compatible search API.

Each lookup is one ``GET <base_url>?format=json&q=<city>, Brasil&limit=1``.
An empty result list means the city does not exist; transport failures,
timeouts and non-2xx answers raise ``GeocoderUnavailable`` so callers can
tell "not found" from "could not ask".
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from route_profit.config import settings
from route_profit.domain.entities import Coordinate
from route_profit.domain.errors import GeocoderUnavailable

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        country_suffix: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ):
        self._client = client
        self.base_url = base_url or settings.geocoder_base_url
        self.country_suffix = (
            country_suffix if country_suffix is not None else settings.geocoder_country_suffix
        )
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds

    def query_for(self, city: str) -> str:
        city = city.strip()
        if not self.country_suffix:
            return city
        return f"{city}, {self.country_suffix}"

    async def resolve(self, city: str) -> Optional[Coordinate]:
        """Return the first match for *city*, or ``None`` when there is none."""
        params = {"format": "json", "q": self.query_for(city), "limit": 1}
        headers = {"User-Agent": self.user_agent}

        if self._client is not None:
            payload = await self._fetch(self._client, params, headers)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                payload = await self._fetch(client, params, headers)

        if not payload:
            return None
        first = payload[0]
        try:
            coords = Coordinate(lat=float(first["lat"]), lng=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocoderUnavailable(f"malformed geocoder answer for {city!r}") from exc
        logger.debug("Geocoded %r -> (%.4f, %.4f)", city, coords.lat, coords.lng)
        return coords

    async def _fetch(self, client: httpx.AsyncClient, params: dict, headers: dict) -> list:
        try:
            response = await client.get(
                self.base_url, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise GeocoderUnavailable(f"timed out after {self.timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise GeocoderUnavailable(str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            raise GeocoderUnavailable("geocoder returned invalid JSON") from exc
        if not isinstance(payload, list):
            raise GeocoderUnavailable("geocoder returned an unexpected payload")
        return payload
