"""Tests for applying and validating edit operations."""

import copy
import logging

import pytest

from resume_structure.config import ParserConfig
from resume_structure.domain import (
    Addition,
    ContactInfo,
    EditOperation,
    Education,
    Experience,
    Removal,
    ResumeStructure,
    Skill,
    StructuredEdit,
    apply_edits,
    format_edit_report,
    validate_edit_operation,
)


@pytest.fixture
def structure() -> ResumeStructure:
    return ResumeStructure(
        contact=ContactInfo(name="Jane Smith", email="jane@example.com"),
        summary="Old summary",
        experience=[
            Experience(
                position="Senior Engineer",
                company="Globex",
                start_date="2020",
                end_date="Present",
                current=True,
                description=["Led a team"],
                id="exp-1",
            ),
            Experience(position="Engineer", company="Initech", start_date="2016", end_date="2019", id="exp-2"),
        ],
        education=[
            Education(institution="A University", degree="BS", end_date="2010", id="edu-a"),
            Education(institution="B University", degree="MS", end_date="2012", id="edu-b"),
            Education(institution="C University", degree="PhD", end_date="2016", id="edu-c"),
        ],
        skills=[Skill("Programming", ["Python", "Go"])],
    )


def _op(edits=(), additions=(), removals=()) -> EditOperation:
    return EditOperation(edits=list(edits), additions=list(additions), removals=list(removals))


class TestEdits:
    def test_summary_replaced_and_nothing_else(self, structure):
        result = apply_edits(structure, _op(edits=[StructuredEdit(section="summary", suggested="New summary text")]))
        assert result.summary == "New summary text"
        result.summary = structure.summary
        assert result == structure

    def test_contact_field(self, structure):
        result = apply_edits(
            structure, _op(edits=[StructuredEdit(section="contact", field="phone", suggested="555-000-1111")])
        )
        assert result.contact.phone == "555-000-1111"
        assert result.contact.email == "jane@example.com"

    def test_experience_description_split_on_newlines(self, structure):
        edit = StructuredEdit(
            section="experience",
            index=0,
            field="description",
            original="Led a team",
            suggested="Led a team of 8\n\nShipped billing v2\n",
        )
        result = apply_edits(structure, _op(edits=[edit]))
        assert result.experience[0].description == ["Led a team of 8", "Shipped billing v2"]

    def test_experience_end_date_recomputes_current(self, structure):
        edit = StructuredEdit(section="experience", index=0, field="endDate", suggested="2023")
        result = apply_edits(structure, _op(edits=[edit]))
        assert result.experience[0].end_date == "2023"
        assert result.experience[0].current is False

        edit = StructuredEdit(section="experience", index=1, field="end_date", suggested="Present")
        assert apply_edits(structure, _op(edits=[edit])).experience[1].current is True

    def test_experience_scalar_field(self, structure):
        edit = StructuredEdit(section="experience", index=1, field="position", suggested="Software Engineer II")
        assert apply_edits(structure, _op(edits=[edit])).experience[1].position == "Software Engineer II"

    def test_education_fields(self, structure):
        edits = [
            StructuredEdit(section="education", index=2, field="gpa", suggested="3.9"),
            StructuredEdit(section="education", index=2, field="achievements", suggested="Fellowship\nTA"),
        ]
        result = apply_edits(structure, _op(edits=edits))
        assert result.education[2].gpa == "3.9"
        assert result.education[2].achievements == ["Fellowship", "TA"]

    def test_skill_items_split_on_commas(self, structure):
        edits = [
            StructuredEdit(section="skills", index=0, field="items", suggested="Python, Rust ,, Go"),
            StructuredEdit(section="skills", index=0, field="category", suggested="Languages"),
        ]
        result = apply_edits(structure, _op(edits=edits))
        assert result.skills[0] == Skill("Languages", ["Python", "Rust", "Go"])

    @pytest.mark.parametrize(
        "edit",
        [
            StructuredEdit(section="experience", index=5, field="position", suggested="x"),
            StructuredEdit(section="experience", index=-1, field="position", suggested="x"),
            StructuredEdit(section="experience", index=None, field="position", suggested="x"),
            StructuredEdit(section="experience", index=0, field="salary", suggested="x"),
            StructuredEdit(section="experience", index=0, field="id", suggested="exp-hijack"),
            StructuredEdit(section="contact", field="twitter", suggested="@jane"),
            StructuredEdit(section="skills", index=0, field="level", suggested="expert"),
            StructuredEdit(section="hobbies", suggested="chess"),
        ],
    )
    def test_unmatched_edits_are_noops(self, structure, edit, caplog):
        with caplog.at_level(logging.WARNING, logger="resume_structure"):
            result = apply_edits(structure, _op(edits=[edit]))
        assert result == structure
        assert "Skipping edit" in caplog.text

    def test_bad_edit_does_not_abort_siblings(self, structure):
        edits = [
            StructuredEdit(section="experience", index=9, field="position", suggested="x"),
            StructuredEdit(section="summary", suggested="Still applied"),
        ]
        assert apply_edits(structure, _op(edits=edits)).summary == "Still applied"


class TestAdditions:
    def test_model_instance(self, structure):
        entry = Experience(position="Intern", company="Hooli", id="exp-3")
        result = apply_edits(structure, _op(additions=[Addition(section="experience", content=entry)]))
        added = result.experience[-1]
        assert added is not entry
        assert (added.position, added.company) == ("Intern", "Hooli")
        assert added.id.startswith("exp-")
        assert added.id != "exp-3"
        assert entry.id == "exp-3"

    def test_copy_of_existing_entry_gets_its_own_id(self, structure):
        op = _op(additions=[Addition(section="experience", content=structure.experience[0])])
        result = apply_edits(structure, op)
        ids = [e.id for e in result.experience]
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert result.experience[2].position == "Senior Engineer"

    def test_dict_id_is_not_reused(self, structure):
        content = {"id": "edu-a", "institution": "D University", "degree": "BA", "endDate": "2008"}
        result = apply_edits(structure, _op(additions=[Addition(section="education", content=content)]))
        assert [e.id for e in result.education].count("edu-a") == 1

    def test_dict_skill_without_category_uses_configured_label(self, structure):
        addition = Addition(section="skills", content={"items": ["Docker"]})
        result = apply_edits(structure, _op(additions=[addition]), ParserConfig(generic_skill_category="Misc"))
        assert result.skills[-1] == Skill("Misc", ["Docker"])

    def test_dict_gets_fresh_id(self, structure):
        content = {"institution": "Bootcamp", "degree": "Certificate", "endDate": "2021"}
        result = apply_edits(structure, _op(additions=[Addition(section="education", content=content)]))
        added = result.education[-1]
        assert added.institution == "Bootcamp"
        assert added.end_date == "2021"
        assert added.id.startswith("edu-")
        assert added.id not in {"edu-a", "edu-b", "edu-c"}

    def test_string_skill(self, structure):
        addition = Addition(section="skills", content="Cloud: AWS, Azure, GCP", reason="Add cloud platforms")
        result = apply_edits(structure, _op(additions=[addition]))
        assert len(result.skills) == 2
        assert result.skills[1] == Skill("Cloud", ["AWS", "Azure", "GCP"])

    def test_string_experience(self, structure):
        content = "Consultant - Acme\n2012 - 2014\n• Advised clients"
        result = apply_edits(structure, _op(additions=[Addition(section="experience", content=content)]))
        added = result.experience[-1]
        assert (added.position, added.company, added.start_date) == ("Consultant", "Acme", "2012")
        assert added.description == ["Advised clients"]

    def test_unusable_content_skipped(self, structure, caplog):
        additions = [
            Addition(section="experience", content="no entry here"),
            Addition(section="skills", content=42),
            Addition(section="summary", content="Not a list section"),
        ]
        with caplog.at_level(logging.WARNING, logger="resume_structure"):
            result = apply_edits(structure, _op(additions=additions))
        assert result == structure
        assert caplog.text.count("Skipping addition") == 3


class TestRemovals:
    def test_indices_removed_in_descending_order(self, structure):
        removals = [Removal(section="education", index=0), Removal(section="education", index=2)]
        result = apply_edits(structure, _op(removals=removals))
        assert [e.id for e in result.education] == ["edu-b"]

    @pytest.mark.parametrize("order", [(0, 1), (1, 0)])
    def test_removal_safety_any_order(self, structure, order):
        removals = [Removal(section="experience", index=i) for i in order]
        assert apply_edits(structure, _op(removals=removals)).experience == []

    def test_duplicate_removal_collapsed(self, structure):
        removals = [Removal(section="education", index=1), Removal(section="education", index=1)]
        result = apply_edits(structure, _op(removals=removals))
        assert [e.id for e in result.education] == ["edu-a", "edu-c"]

    def test_out_of_range_removal_is_noop(self, structure, caplog):
        removals = [Removal(section="education", index=7), Removal(section="education", index=-1)]
        with caplog.at_level(logging.WARNING, logger="resume_structure"):
            result = apply_edits(structure, _op(removals=removals))
        assert len(result.education) == 3
        assert "out of range" in caplog.text

    def test_bad_removal_does_not_abort_siblings(self, structure):
        removals = [Removal(section="education", index=10), Removal(section="education", index=0)]
        result = apply_edits(structure, _op(removals=removals))
        assert [e.id for e in result.education] == ["edu-b", "edu-c"]

    def test_removals_run_after_additions(self, structure):
        op = _op(
            additions=[Addition(section="skills", content="Cloud: AWS")],
            removals=[Removal(section="skills", index=0)],
        )
        result = apply_edits(structure, op)
        assert [s.category for s in result.skills] == ["Cloud"]


class TestNonMutation:
    def test_inputs_untouched(self, structure):
        before = copy.deepcopy(structure)
        op = _op(
            edits=[
                StructuredEdit(section="summary", suggested="x"),
                StructuredEdit(section="experience", index=0, field="description", suggested="a\nb"),
                StructuredEdit(section="skills", index=0, field="items", suggested="Rust"),
                StructuredEdit(section="contact", field="name", suggested="J. Smith"),
            ],
            additions=[Addition(section="skills", content={"category": "Cloud", "items": ["AWS"]})],
            removals=[Removal(section="education", index=2), Removal(section="education", index=0)],
        )
        op_before = copy.deepcopy(op)
        apply_edits(structure, op)
        assert structure == before
        assert op == op_before

    def test_ids_stable(self, structure):
        op = _op(edits=[StructuredEdit(section="experience", index=0, field="company", suggested="Globex Corp")])
        result = apply_edits(structure, op)
        assert [e.id for e in result.experience] == ["exp-1", "exp-2"]


class TestValidateEditOperation:
    def test_clean_operation(self, structure):
        op = _op(
            edits=[StructuredEdit(section="experience", index=1, field="company", suggested="Initech LLC")],
            additions=[Addition(section="skills", content="Cloud: AWS")],
            removals=[Removal(section="skills", index=1)],
        )
        result = validate_edit_operation(structure, op)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_reports_every_noop(self, structure):
        op = _op(
            edits=[
                StructuredEdit(section="hobbies", suggested="chess"),
                StructuredEdit(section="experience", index=0, field="salary", suggested="x"),
                StructuredEdit(section="education", index=3, field="gpa", suggested="4.0"),
                StructuredEdit(section="skills", field="items", suggested="Rust"),
            ],
            additions=[Addition(section="experience", content="nothing useful")],
            removals=[Removal(section="education", index=5)],
        )
        result = validate_edit_operation(structure, op)
        assert not result.valid
        assert [e["check"] for e in result.errors] == [
            "unknown_section",
            "unknown_field",
            "index_out_of_range",
            "missing_index",
            "unusable_content",
            "index_out_of_range",
        ]

    def test_duplicate_removal_is_warning(self, structure):
        removals = [Removal(section="experience", index=0), Removal(section="experience", index=0)]
        result = validate_edit_operation(structure, _op(removals=removals))
        assert result.valid
        assert [w["check"] for w in result.warnings] == ["duplicate_removal"]

    def test_confidence_out_of_range_is_warning(self, structure):
        edit = StructuredEdit(section="summary", suggested="x", confidence=1.5)
        result = validate_edit_operation(structure, _op(edits=[edit]))
        assert result.valid
        assert result.warnings[0]["check"] == "confidence"

    def test_validation_does_not_apply(self, structure):
        before = copy.deepcopy(structure)
        validate_edit_operation(structure, _op(edits=[StructuredEdit(section="summary", suggested="x")]))
        assert structure == before

    def test_report(self, structure):
        op = _op(removals=[Removal(section="experience", index=4)])
        report = format_edit_report(validate_edit_operation(structure, op))
        assert "FAIL" in report
        assert "[index_out_of_range]" in report

    def test_report_clean(self, structure):
        report = format_edit_report(validate_edit_operation(structure, _op()))
        assert "PASS" in report
        assert "All edits apply cleanly." in report
