"""Tests for line classification and section bucketing."""

import pytest

from resume_structure.domain.section_scanner import (
    LineKind,
    classify_line,
    group_sections,
    match_canonical_header,
    scan,
)


class TestClassifyLine:
    @pytest.mark.parametrize(
        "line, section",
        [
            ("PROFESSIONAL EXPERIENCE", "experience"),
            ("Work Experience:", "experience"),
            ("EMPLOYMENT", "experience"),
            ("Summary", "summary"),
            ("OBJECTIVE", "summary"),
            ("Education", "education"),
            ("COMPETENCIES", "skills"),
            ("Technical Skills", "skills"),
            ("Contact Information", "contact"),
        ],
    )
    def test_canonical_headers(self, line, section):
        result = classify_line(line)
        assert result.kind == LineKind.HEADER
        assert result.section == section
        assert not result.is_custom_header

    def test_header_phrase_must_fill_the_line(self):
        assert match_canonical_header("Experience with distributed systems") is None
        assert classify_line("Experience with distributed systems").kind == LineKind.CONTENT

    def test_custom_all_caps_header(self):
        result = classify_line("CERTIFICATIONS & AWARDS")
        assert result.kind == LineKind.HEADER
        assert result.section == "CERTIFICATIONS & AWARDS"
        assert result.is_custom_header

    def test_custom_header_length_limits(self):
        assert classify_line("AB").kind == LineKind.CONTENT
        assert classify_line("A" * 31).kind == LineKind.CONTENT

    def test_custom_header_disabled(self):
        assert classify_line("JANE DOE", allow_custom=False).kind == LineKind.CONTENT

    def test_canonical_header_wins_when_custom_disabled(self):
        assert classify_line("SKILLS", allow_custom=False).section == "skills"

    @pytest.mark.parametrize("line", ["• Led a team", "- Built APIs", "* Wrote docs"])
    def test_bullets(self, line):
        assert classify_line(line).kind == LineKind.BULLET

    def test_blank(self):
        assert classify_line("   ").kind == LineKind.BLANK


class TestScan:
    def test_empty_input(self):
        assert scan("") == []

    def test_preamble_then_sections(self):
        text = "JANE DOE\njane@example.com\n\nSKILLS\nPython\n\nVOLUNTEERING\nFood bank"
        scanned = scan(text)
        assert [(s.section, s.text) for s in scanned] == [
            (None, "JANE DOE"),
            (None, "jane@example.com"),
            ("skills", "Python"),
            ("VOLUNTEERING", "Food bank"),
        ]

    def test_no_headers_everything_in_preamble(self):
        scanned = scan("Jane Doe\nSome line\nAnother line")
        assert {s.section for s in scanned} == {None}

    def test_bullet_kind_kept(self):
        scanned = scan("EXPERIENCE\n• Did things")
        assert scanned[0].kind == LineKind.BULLET

    def test_group_sections(self):
        blocks = group_sections(scan("Jane\nEXPERIENCE\na\nb\nAWARDS\nc"))
        assert [(b.section, b.lines, b.is_custom) for b in blocks] == [
            (None, ["Jane"], False),
            ("experience", ["a", "b"], False),
            ("AWARDS", ["c"], True),
        ]
