import re

import pytest

from services.fallback_extractor import (
    EXPERIENCE_RULES,
    FallbackExtractor,
    first_match,
    merge_ai_preferred,
    merge_combine,
)


class TestFallbackExtractor:
    def setup_method(self):
        self.extractor = FallbackExtractor()

    @pytest.mark.parametrize(
        "text, years",
        [
            ("5+ years of experience in backend", 5),
            ("Minimum of 3 years building APIs", 3),
            ("at least 2 years", 2),
            ("3 to 5 years in backend roles", 3),
            ("Experience: 4 years", 4),
            ("7 years experience", 7),
            ("No stated requirement", 0),
            ("", 0),
        ],
    )
    def test_experience_years(self, text, years):
        assert self.extractor.extract_experience_years(text) == years

    def test_implausible_experience_is_rejected(self):
        assert self.extractor.extract_experience_years("40 years of experience") == 0

    @pytest.mark.parametrize(
        "text, level",
        [
            ("PhD or Master's preferred", "PhD"),
            ("MS in Computer Science", "Master's"),
            ("B.Tech or equivalent", "Bachelor's"),
            ("Associate degree in IT", "Associate's"),
            ("High school diploma", "Diploma"),
            ("Tell me about yourself as well", None),
        ],
    )
    def test_education(self, text, level):
        assert self.extractor.extract_education(text) == level

    def test_sections(self, sample_jd):
        required = self.extractor.extract_sections(sample_jd, ("requirements",))
        assert len(required) == 1
        assert "Django" in required[0]
        assert "Kubernetes" not in required[0]

    def test_required_skills(self, sample_jd):
        assert self.extractor.extract_required_skills(sample_jd) == [
            "python", "django", "postgresql", "redis",
        ]

    def test_preferred_skills(self, sample_jd):
        assert self.extractor.extract_preferred_skills(sample_jd) == ["kubernetes", "graphql"]

    def test_marked_skills_without_sections(self):
        text = "We ship fast. Docker is required and GraphQL is preferred."
        assert self.extractor.extract_required_skills(text) == ["docker"]
        assert self.extractor.extract_preferred_skills(text) == ["graphql"]

    def test_keywords(self, sample_jd):
        keywords = self.extractor.extract_keywords(sample_jd)
        assert keywords[:2] == ["backend", "python"]
        assert "and" not in keywords
        assert all(len(k) >= 4 for k in keywords)
        assert len(keywords) <= 30

    def test_extract_full(self, sample_jd):
        result = self.extractor.extract(sample_jd)
        assert result.experience_years == 5
        assert result.education == "Bachelor's"
        assert "python" in result.required_skills

    def test_empty_text(self):
        result = self.extractor.extract("")
        assert result.required_skills == []
        assert result.keywords == []
        assert result.experience_years == 0
        assert result.education is None


def test_first_match_respects_accept():
    rules = (
        (re.compile(r"a(\d)"), lambda m: int(m.group(1))),
        (re.compile(r"b(\d)"), lambda m: int(m.group(1))),
    )
    assert first_match(rules, "a9 b2") == 9
    assert first_match(rules, "a9 b2", accept=lambda v: v < 5) == 2
    assert first_match(rules, "nothing") is None


def test_experience_rules_are_ordered():
    # The "N+ years of experience" form is tried first.
    assert first_match(EXPERIENCE_RULES, "3 to 5 years, 8+ years of experience") == 8


class TestMerge:
    def test_ai_preferred_keeps_ai_order(self):
        assert merge_ai_preferred(["React", "Docker"], ["docker", "aws"]) == [
            "React", "Docker", "aws",
        ]

    def test_ai_preferred_empty_sides(self):
        assert merge_ai_preferred([], ["a"]) == ["a"]
        assert merge_ai_preferred(["A"], []) == ["A"]
        assert merge_ai_preferred(None, None) == []

    def test_combine_lowercases_union(self):
        assert merge_combine(["React"], ["react", "AWS"]) == ["react", "aws"]

    def test_merge_does_not_mutate_inputs(self):
        ai = ["React"]
        merge_ai_preferred(ai, ["Vue"])
        merge_combine(ai, ["Vue"])
        assert ai == ["React"]
