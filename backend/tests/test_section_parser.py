from datetime import datetime

from services.section_parser import (
    extract_contact_info,
    extract_explicit_years,
    months_between,
    parse_date,
    parse_sections,
    section_for_heading,
)

TODAY = datetime(2024, 1, 15)


def test_parse_sections_detects_all(sample_resume):
    sections = parse_sections(sample_resume)
    assert "summary" in sections
    assert "experience" in sections
    assert "education" in sections
    assert "skills" in sections


def test_parse_sections_header(sample_resume):
    sections = parse_sections(sample_resume)
    assert "header" in sections
    assert "John Doe" in sections["header"]


def test_parse_sections_content(sample_resume):
    sections = parse_sections(sample_resume)
    assert "TechCorp" in sections["experience"]
    assert "State University" in sections["education"]
    assert "Python" in sections["skills"]


def test_parse_sections_alternate_headers():
    text = "Work Experience:\nAcme\n\nTechnical Skills\nGo\n\nAcademic Background\nBSc"
    sections = parse_sections(text)
    assert sections["experience"] == "Acme"
    assert sections["skills"] == "Go"
    assert sections["education"] == "BSc"


def test_contact_info(sample_resume):
    contact = extract_contact_info(sample_resume)
    assert contact["email"] == "john.doe@email.com"
    assert contact["phone"] == "(555) 123-4567"
    assert contact["linkedin"] == "linkedin.com/in/johndoe"
    assert contact["github"] == "github.com/johndoe"


def test_contact_info_missing():
    contact = extract_contact_info("No contact details here")
    assert contact == {"email": None, "phone": None, "linkedin": None, "github": None}


class TestDates:
    def test_month_and_year(self):
        assert parse_date("Mar 2019") == (2019, 3)
        assert parse_date("September 2020") == (2020, 9)
        assert parse_date("Jan. 2021") == (2021, 1)

    def test_bare_year(self):
        assert parse_date("2018") == (2018, 1)

    def test_present(self):
        assert parse_date("Present", TODAY) == (2024, 1)
        assert parse_date("current", TODAY) == (2024, 1)

    def test_unrecognized(self):
        assert parse_date("someday") == (0, 0)
        assert parse_date("1850") == (0, 0)

    def test_months_between(self):
        assert months_between("Jan 2021", "Present", TODAY) == 36
        assert months_between("2019", "2021") == 24

    def test_reversed_range_is_ignored(self):
        assert months_between("2022", "2020") == 0


def test_explicit_years():
    assert extract_explicit_years("5+ years of experience, 8 yrs exp in Python") == 8.0
    assert extract_explicit_years("No claims") == 0.0


def test_repeated_heading_extends_section():
    text = "Experience\nAcme\n\nSkills\nGo\n\nExperience\nGlobex"
    assert parse_sections(text)["experience"] == "Acme\n\nGlobex"


def test_section_for_heading():
    assert section_for_heading("  Professional Experience: ") == "experience"
    assert section_for_heading("Certifications") == "certifications"
    assert section_for_heading("Built tools for experience teams") is None
    assert section_for_heading("") is None
