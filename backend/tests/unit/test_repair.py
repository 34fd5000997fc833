"""
Unit tests for the deterministic repairs applied to extraction output.
"""

import pytest

from resume_builder.services.ai.repair import (
    FALLBACK_HEADLINE,
    derive_headline,
    normalize_deadline,
    repair_job_description,
    repair_professional_headline,
)


class TestProfessionalHeadline:
    """Headline backfill for CV extraction."""

    def test_first_non_intern_title_wins(self):
        data = {
            "personalInfo": {"firstName": "Jane"},
            "experience": [{"title": "Intern Developer"}, {"title": "Backend Engineer", "company": "Acme"}],
        }
        repaired = repair_professional_headline(data)
        assert repaired["personalInfo"]["professionalHeadline"] == "Backend Engineer"

    def test_degree_plus_student_when_nothing_else(self):
        data = {"experience": [], "summary": "", "education": [{"degree": "BSc Computer Science"}]}
        repaired = repair_professional_headline(data)
        assert repaired["personalInfo"]["professionalHeadline"] == "BSc Computer Science Student"

    def test_title_is_trimmed_at_for_and_parenthesis(self):
        data = {"experience": [{"title": "Admin Manager for Site X (part-time)"}]}
        assert derive_headline(data) == "Admin Manager"

    def test_position_key_is_accepted(self):
        data = {"experience": [{"position": "Data Analyst"}]}
        assert derive_headline(data) == "Data Analyst"

    def test_only_interns_falls_back_to_first_role(self):
        data = {"experience": [{"title": "Marketing Intern"}, {"title": "Sales Intern"}]}
        assert derive_headline(data) == "Marketing Intern"

    def test_summary_keyword_with_preceding_word(self):
        data = {"experience": [], "summary": "Creative UX Designer focused on mobile apps"}
        assert derive_headline(data) == "UX Designer"

    def test_summary_keyword_at_start(self):
        data = {"summary": "Developer with broad experience"}
        assert derive_headline(data) == "Developer"

    def test_literal_fallback(self):
        assert derive_headline({}) == FALLBACK_HEADLINE

    def test_existing_headline_is_kept(self):
        data = {
            "personalInfo": {"professionalHeadline": "Staff Engineer"},
            "experience": [{"title": "Backend Engineer"}],
        }
        assert repair_professional_headline(data)["personalInfo"]["professionalHeadline"] == "Staff Engineer"

    def test_input_is_not_mutated(self):
        data = {"personalInfo": {}, "experience": [{"title": "Backend Engineer"}]}
        repair_professional_headline(data)
        assert "professionalHeadline" not in data["personalInfo"]

    def test_missing_personal_info_is_created(self):
        repaired = repair_professional_headline({"experience": [{"title": "Engineer"}]})
        assert repaired["personalInfo"] == {"professionalHeadline": "Engineer"}


class TestDeadline:
    """Application deadline normalisation."""

    @pytest.mark.parametrize("value,expected", [
        ("2025-03-31", "2025-03-31T00:00:00.000Z"),
        ("2025-03-31T12:30:00+02:00", "2025-03-31T10:30:00.000Z"),
        ("March 31, 2025", "2025-03-31T00:00:00.000Z"),
    ])
    def test_parses_to_utc(self, value, expected):
        assert normalize_deadline(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not a date at all", 42])
    def test_unparseable_becomes_none(self, value):
        assert normalize_deadline(value) is None

    def test_repair_sets_field(self):
        repaired = repair_job_description({"position": "Dev", "applicationDeadline": "2025-01-15"})
        assert repaired["applicationDeadline"] == "2025-01-15T00:00:00.000Z"
        assert repaired["position"] == "Dev"
