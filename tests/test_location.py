"""
Tests for location.py and geocoding.py - location proximity scoring.
"""

import pytest
import requests

from jobdiscovery.geocoding import Coordinates, NominatimGeocoder, haversine_km
from jobdiscovery.location import LocationScorer, distance_to_score, parse_location
from jobdiscovery.retry import CircuitBreaker

from conftest import FakeGeocoder, FakeResponse, FakeSession, RaisingGeocoder


class TestDistanceBuckets:
    @pytest.mark.parametrize("km,expected", [
        (0, 1.0), (10, 1.0), (10.1, 0.8), (25, 0.8), (49, 0.6), (100, 0.4), (100.5, 0.2), (4000, 0.2),
    ])
    def test_buckets(self, km, expected):
        assert distance_to_score(km) == expected


class TestLocationScorer:
    """Remote / geocode state machine."""

    def test_both_remote(self, fake_geocoder):
        assert LocationScorer(fake_geocoder).score("Remote", "Remote - US") == 1.0

    def test_one_remote(self, fake_geocoder):
        assert LocationScorer(fake_geocoder).score("Remote", "Austin, TX") == 0.5

    def test_remote_does_not_geocode(self, fake_geocoder):
        LocationScorer(fake_geocoder).score("Remote", "San Francisco, CA")
        assert fake_geocoder.calls == []

    def test_nearby_cities(self, fake_geocoder):
        """San Francisco to Oakland is about 13km."""
        assert LocationScorer(fake_geocoder).score("San Francisco, CA", "Oakland, CA") == 0.8

    def test_far_cities(self, fake_geocoder):
        assert LocationScorer(fake_geocoder).score("San Francisco, CA", "New York, NY") == 0.2

    def test_geocode_failure_is_fail_open(self):
        """A geocoder that never answers gives exactly 0.3 for any non-remote pair."""
        scorer = LocationScorer(FakeGeocoder())
        assert scorer.score("Austin, TX", "Denver, CO") == 0.3
        assert scorer.score("Austin, TX", "Austin, TX") == 0.3

    def test_geocoder_exception_is_fail_open(self):
        """A geocoder that raises is treated like one that found nothing."""
        scorer = LocationScorer(RaisingGeocoder(ConnectionError("geocoder down")))
        assert scorer.score("Austin, TX", "Denver, CO") == 0.3
        assert scorer.similarity("Austin, TX", "Denver, CO") == 0.3

    def test_distance_exception_is_fail_open(self, fake_geocoder):
        def broken(*args):
            raise ValueError("bad coordinates")

        scorer = LocationScorer(fake_geocoder, distance=broken)
        assert scorer.score("San Francisco, CA", "New York, NY") == 0.3

    def test_uses_injected_distance(self, fake_geocoder):
        scorer = LocationScorer(fake_geocoder, distance=lambda *args: 40.0)
        assert scorer.score("San Francisco, CA", "New York, NY") == 0.6

    def test_parse_location(self):
        parsed = parse_location("  Remote ")
        assert parsed.is_remote
        assert parsed.raw == "Remote"


class TestLocationSimilarity:
    """Short-circuits used by the catalog scoring policy."""

    def test_exact_match(self):
        assert LocationScorer(FakeGeocoder()).similarity("Austin, TX", "austin, tx") == 1.0

    def test_same_city(self):
        assert LocationScorer(FakeGeocoder()).similarity("Austin, TX", "Austin, Texas") == 0.8

    def test_missing_location(self):
        assert LocationScorer(FakeGeocoder()).similarity("", "Austin, TX") == 0.0
        assert LocationScorer(FakeGeocoder()).similarity("Austin, TX", None) == 0.0

    def test_falls_back_to_geocoding(self, fake_geocoder):
        assert LocationScorer(fake_geocoder).similarity("San Francisco, CA", "San Jose, CA") == 0.4


class TestHaversine:
    def test_zero_distance(self):
        assert haversine_km(10.0, 10.0, 10.0, 10.0) == 0.0

    def test_known_distance(self):
        """San Francisco to New York is roughly 4130km."""
        km = haversine_km(37.7749, -122.4194, 40.7128, -74.0060)
        assert 4100 < km < 4160


class TestNominatimGeocoder:
    """Geocoding collaborator over requests."""

    def test_parses_first_result(self):
        session = FakeSession([FakeResponse([{"lat": "30.2672", "lon": "-97.7431"}])])
        geocoder = NominatimGeocoder(session=session)

        assert geocoder.geocode("Austin, TX") == Coordinates(30.2672, -97.7431)
        assert session.calls[0]["q"] == "Austin, TX"
        assert session.calls[0]["format"] == "json"

    def test_caches_by_normalized_address(self):
        session = FakeSession([FakeResponse([{"lat": "1", "lon": "2"}])])
        geocoder = NominatimGeocoder(session=session)

        geocoder.geocode("Austin, TX")
        geocoder.geocode("  austin,  tx")
        assert len(session.calls) == 1

    def test_no_results_is_none(self):
        geocoder = NominatimGeocoder(session=FakeSession([FakeResponse([])]))
        assert geocoder.geocode("Atlantis") is None

    def test_network_error_is_none(self):
        session = FakeSession([requests.exceptions.ConnectionError("down")])
        geocoder = NominatimGeocoder(session=session)
        assert geocoder.geocode("Austin, TX") is None

    def test_circuit_opens_after_repeated_failures(self):
        session = FakeSession([requests.exceptions.ConnectionError("down")])
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60,
                                 expected_exception=Exception)
        geocoder = NominatimGeocoder(session=session, breaker=breaker)

        for address in ("a city", "b city", "c city", "d city"):
            assert geocoder.geocode(address) is None

        assert breaker.state == CircuitBreaker.OPEN
        assert len(session.calls) == 2

    def test_empty_address(self):
        session = FakeSession([FakeResponse([])])
        assert NominatimGeocoder(session=session).geocode("  ") is None
        assert session.calls == []
