"""
Location proximity scoring.

LocationScorer holds no cache of its own; given the same geocoder answers
it always returns the same score.
"""

from typing import Callable, NamedTuple, Optional

from .geocoding import haversine_km
from .logger import get_logger
from .normalize import city_of, is_remote, normalize_text

BOTH_REMOTE_SCORE = 1.0
ONE_REMOTE_SCORE = 0.5
GEOCODE_FAILED_SCORE = 0.3
EXACT_MATCH_SCORE = 1.0
SAME_CITY_SCORE = 0.8

logger = get_logger()

# (max distance km, score); anything further scores FAR_SCORE.
DISTANCE_BUCKETS = (
    (10, 1.0),
    (25, 0.8),
    (50, 0.6),
    (100, 0.4),
)
FAR_SCORE = 0.2


class ParsedLocation(NamedTuple):
    is_remote: bool
    raw: str


def parse_location(location: Optional[str]) -> ParsedLocation:
    return ParsedLocation(is_remote=is_remote(location), raw=(location or "").strip())


def distance_to_score(distance_km: float) -> float:
    for limit, score in DISTANCE_BUCKETS:
        if distance_km <= limit:
            return score
    return FAR_SCORE


class LocationScorer:
    def __init__(self, geocoder, distance: Callable[[float, float, float, float], float] = haversine_km):
        self.geocoder = geocoder
        self.distance = distance

    def score(self, location_a: Optional[str], location_b: Optional[str]) -> float:
        """Remote markers first, then geocoded distance buckets; 0.3 if geocoding fails."""
        a = parse_location(location_a)
        b = parse_location(location_b)

        if a.is_remote and b.is_remote:
            return BOTH_REMOTE_SCORE
        if a.is_remote or b.is_remote:
            return ONE_REMOTE_SCORE

        try:
            coords_a = self.geocoder.geocode(a.raw) if a.raw else None
            coords_b = self.geocoder.geocode(b.raw) if b.raw else None
            if coords_a is None or coords_b is None:
                return GEOCODE_FAILED_SCORE
            km = self.distance(coords_a[0], coords_a[1], coords_b[0], coords_b[1])
        except Exception as e:
            logger.warning(
                f"Location scoring fell back after geocoder error: {e}",
                location_a=a.raw,
                location_b=b.raw,
                error_type=type(e).__name__,
            )
            return GEOCODE_FAILED_SCORE
        return distance_to_score(km)

    def similarity(self, location_a: Optional[str], location_b: Optional[str]) -> float:
        """score() with exact-string and same-city short-circuits in front."""
        norm_a = normalize_text(location_a)
        norm_b = normalize_text(location_b)
        if not norm_a or not norm_b:
            return 0.0
        if norm_a == norm_b:
            return EXACT_MATCH_SCORE
        city_a, city_b = city_of(norm_a), city_of(norm_b)
        if city_a and city_a == city_b and not is_remote(city_a):
            return SAME_CITY_SCORE
        return self.score(location_a, location_b)
