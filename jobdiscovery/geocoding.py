"""
Geocoding collaborator backed by OpenStreetMap Nominatim.

geocode() never raises: any failure (network, bad payload, open circuit)
comes back as None so callers can fall back to a default score.
"""

import math
from typing import Dict, NamedTuple, Optional

import requests

from .errors import GeocodeUnavailableError
from .logger import get_logger
from .normalize import normalize_text
from .retry import CircuitBreaker, CircuitOpenError

logger = get_logger()

EARTH_RADIUS_KM = 6371.0


class Coordinates(NamedTuple):
    lat: float
    lon: float


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class NominatimGeocoder:
    """Address lookups with an in-memory cache and a circuit breaker."""

    def __init__(
        self,
        url: str = "https://nominatim.openstreetmap.org/search",
        user_agent: str = "jobdiscovery/0.1",
        timeout: float = 10.0,
        breaker: Optional[CircuitBreaker] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=3, recovery_timeout=60, expected_exception=GeocodeUnavailableError
        )
        self.session = session or requests.Session()
        self._cache: Dict[str, Optional[Coordinates]] = {}

    def geocode(self, address: str) -> Optional[Coordinates]:
        key = normalize_text(address)
        if not key:
            return None
        if key in self._cache:
            return self._cache[key]

        try:
            coords = self.breaker.call(self._lookup, address)
        except CircuitOpenError:
            logger.debug("Geocoder circuit open, skipping lookup", address=address)
            return None
        except GeocodeUnavailableError as e:
            logger.warning("Geocoding failed", address=address, error=str(e))
            logger.record_geocode_lookup(success=False)
            return None

        logger.record_geocode_lookup(success=coords is not None)
        self._cache[key] = coords
        return coords

    def distance(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        return haversine_km(lat1, lon1, lat2, lon2)

    def _lookup(self, address: str) -> Optional[Coordinates]:
        try:
            resp = self.session.get(
                self.url,
                params={"q": address, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            results = resp.json()
        except requests.exceptions.RequestException as e:
            raise GeocodeUnavailableError(f"Geocoder request failed: {e}") from e
        except ValueError as e:
            raise GeocodeUnavailableError(f"Geocoder returned invalid JSON: {e}") from e

        if not results:
            return None
        try:
            first = results[0]
            return Coordinates(float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodeUnavailableError(f"Unexpected geocoder payload: {e}") from e
