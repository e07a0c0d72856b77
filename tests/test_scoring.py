"""
Tests for scoring.py - catalog and web similarity policies.
"""

import itertools

from jobdiscovery.models import ReferenceJob
from jobdiscovery.scoring import (
    CATALOG_POLICY,
    WEB_POLICY,
    SimilarityScorer,
    company_similarity,
    description_similarity,
    passes_minimum,
    skills_similarity,
    title_similarity,
)
from jobdiscovery.location import LocationScorer

from conftest import FakeGeocoder, make_candidate


class TestSubScores:
    """Individual similarity components."""

    def test_title_exact(self):
        assert title_similarity("Software Engineer", "software  engineer") == 1.0

    def test_title_role_match(self):
        assert title_similarity("Software Engineer", "Senior Software Engineer") == 0.8
        assert title_similarity("Backend Engineer", "Data Engineer") == 0.8

    def test_title_jaccard_fallback(self):
        """No shared role: Jaccard over seniority-stripped tokens."""
        assert title_similarity("Product Owner", "Sr. Product Lead") == 1 / 3

    def test_title_empty(self):
        assert title_similarity("", "Engineer") == 0.0

    def test_company_binary(self):
        assert company_similarity("Acme, Inc.", "ACME") == 1.0
        assert company_similarity("Acme", "Acme Labs") == 0.0
        assert company_similarity("", "") == 0.0

    def test_description_uses_technical_terms_only(self):
        assert description_similarity("We love Python and Docker", "Python, docker, coffee") == 1.0
        assert description_similarity("Great team", "Python") == 0.0

    def test_skills(self):
        assert skills_similarity(["Python", "SQL"], ["python", "sql"]) == 1.0
        assert skills_similarity([], ["python"]) == 0.0
        assert skills_similarity(None, None) == 0.0


class TestCatalogPolicy:
    """Weighted scoring of catalog candidates."""

    def test_senior_variant_at_same_company(self, scorer):
        reference = ReferenceJob(title="Software Engineer", company="Acme", location="Remote")
        candidate = make_candidate("Senior Software Engineer", "Acme", location="Remote")

        b = scorer.score(reference, candidate)

        assert b.policy == CATALOG_POLICY
        assert b.title == 0.8
        assert b.company == 1.0
        assert b.location == 1.0
        assert b.score >= 0.7
        assert "Same company" in b.reasons
        assert "Similar job title" in b.reasons

    def test_empty_description_and_skills(self, scorer):
        """Description and skills contribute nothing; score is bounded by the rest."""
        reference = ReferenceJob(title="Software Engineer", company="Acme", location="Remote")
        candidate = make_candidate("Software Engineer", "Acme", location="Remote")

        b = scorer.score(reference, candidate)

        assert b.description == 0.0
        assert b.skills == 0.0
        assert b.score == 0.8  # title .4 + company .2 + location .2

    def test_geocode_failure_keeps_candidate(self):
        scorer = SimilarityScorer(LocationScorer(FakeGeocoder()))
        reference = ReferenceJob(title="Analyst", company="Acme", location="Austin, TX")
        candidate = make_candidate("Analyst", "Other", location="Denver, CO")

        b = scorer.score(reference, candidate)

        assert b.location == 0.3
        assert passes_minimum(b)

    def test_job_type_and_level_reasons(self, scorer, reference_job):
        candidate = make_candidate("Barista", "Cafe", job_type="full-time", experience_level="mid")
        b = scorer.score(reference_job, candidate)

        assert "Same job type" in b.reasons
        assert "Same experience level" in b.reasons

    def test_score_is_rounded(self, scorer, reference_job):
        candidate = make_candidate("Software Developer", "Acme", description="Python and Flask")
        b = scorer.score(reference_job, candidate)
        assert b.score == round(b.score, 2)


class TestWebPolicy:
    """Keyword-coverage scoring of scraped candidates."""

    def test_selected_for_scraped_sources(self, scorer, reference_job):
        candidate = make_candidate("Software Engineer", "Acme", source="indeed")
        assert scorer.score(reference_job, candidate, ["software", "engineer"]).policy == WEB_POLICY

    def test_react_developer(self, scorer):
        reference = ReferenceJob(title="React Developer", company="Acme", description="React, JavaScript and CSS")
        keywords = ["react", "developer", "javascript", "css", "acme"]
        candidate = make_candidate(
            "Frontend React Developer", "Globex", source="linkedin",
            description="Build UIs in React and JavaScript", location="Remote",
        )

        b = scorer.score(reference, candidate, keywords)

        # title 2/3, description 2/5, remote bonus
        assert b.score > 0.3
        assert passes_minimum(b)

    def test_company_and_remote_bonuses(self, scorer, reference_job):
        keywords = ["python"]
        plain = make_candidate("Barista", "Cafe", source="indeed", location="Austin, TX")
        bonus = make_candidate("Barista", "Acme", source="indeed", location="Remote")

        assert scorer.score(reference_job, plain, keywords).score == 0.0
        assert scorer.score(reference_job, bonus, keywords).score == 0.3

    def test_minimum_filter_is_strict(self, scorer, reference_job):
        """Company bonus alone (0.2) does not beat the 0.2 floor."""
        candidate = make_candidate("Barista", "Acme", source="indeed", location="Austin, TX")
        b = scorer.score(reference_job, candidate, ["python"])

        assert b.score == 0.2
        assert not passes_minimum(b)

    def test_no_keywords(self, scorer, reference_job):
        candidate = make_candidate("Software Engineer", "Globex", source="glassdoor", location="Austin, TX")
        assert scorer.score(reference_job, candidate, []).score == 0.0


class TestScoreBounds:
    """Every policy keeps scores in [0, 1]."""

    def test_bounds_over_mixed_pairs(self, scorer):
        titles = ["Software Engineer", "Senior Software Engineer", "Barista", ""]
        companies = ["Acme", "Globex", ""]
        locations = ["Remote", "San Francisco, CA", "Oakland, CA", "", "Mars"]
        sources = ["catalog", "indeed"]
        description = "Python Django AWS Docker Kubernetes React"

        reference = ReferenceJob(
            title="Software Engineer", company="Acme", description=description,
            location="San Francisco, CA", skills=("python", "aws"),
        )
        keywords = ["software", "engineer", "python", "django", "aws", "acme"]
        for title, company, location, source in itertools.product(titles, companies, locations, sources):
            candidate = make_candidate(title or "x", company, source=source, description=description,
                                       location=location, skills=["python", "aws"])
            candidate.title = title
            b = scorer.score(reference, candidate, keywords)
            assert 0.0 <= b.score <= 1.0
