from datetime import datetime

import pytest

from services.resume_extractor import ResumeProfileBuilder, assess_parse_quality

TODAY = datetime(2024, 1, 15)


class TestResumeProfileBuilder:
    def setup_method(self):
        self.builder = ResumeProfileBuilder()

    def test_build(self, sample_resume):
        profile = self.builder.build(sample_resume, today=TODAY)

        assert profile.raw_text == sample_resume
        assert profile.contact.email == "john.doe@email.com"
        assert profile.total_years_experience == pytest.approx(5.0)
        assert profile.parse_quality == 4

    def test_experience_entries(self, sample_resume):
        entries = self.builder.build(sample_resume, today=TODAY).experience_entries

        assert len(entries) == 2
        assert entries[0].title == "Senior Software Engineer | TechCorp"
        assert entries[0].start_date == "Jan 2021"
        assert entries[0].end_date == "Present"
        assert entries[0].duration_months == 36
        assert entries[0].description.startswith("Built REST APIs")
        assert entries[1].duration_months == 24
        assert entries[1].description == "Developed React frontend components"

    def test_education_entries(self, sample_resume):
        entries = self.builder.build(sample_resume).education_entries
        assert len(entries) == 1
        assert entries[0].level == "Bachelor's"
        assert entries[0].institution == "State University"

    def test_skills(self, sample_resume):
        skills = self.builder.build(sample_resume).skills
        assert skills[:7] == ["Python", "JavaScript", "React", "Docker", "AWS", "PostgreSQL", "Git"]
        lowered = [s.lower() for s in skills]
        assert "django" in lowered
        assert "rest" in lowered
        assert "java" not in lowered
        assert len(lowered) == len(set(lowered))

    def test_labelled_skill_lines(self):
        text = "Skills\nLanguages: Go; Rust\nTools: Terraform"
        assert self.builder.extract_skills(text, "Languages: Go; Rust\nTools: Terraform")[:3] == [
            "Go", "Rust", "Terraform",
        ]

    def test_explicit_claim_beats_dated_roles(self):
        text = "Summary\n10 years of experience\n\nExperience\nEngineer | 2020 - 2022"
        assert self.builder.build(text).total_years_experience == 10.0

    def test_empty_text(self):
        profile = self.builder.build("")
        assert profile.skills == []
        assert profile.experience_entries == []
        assert profile.total_years_experience == 0.0
        assert profile.parse_quality == 0


class TestParseQuality:
    def test_short_unstructured(self):
        assert assess_parse_quality("hello") == 0

    def test_long_structured(self):
        assert assess_parse_quality("Experience Education Skills " * 50) == 5

    def test_medium_length(self):
        assert assess_parse_quality("Experience " + "a" * 600) == 4

    def test_special_characters(self):
        assert assess_parse_quality("Skills " + "★" * 200 + "a" * 1000) == 3
