"""
Profile record
==============

Shape and normalisation rules of the record every renderer reads.
"""

import pytest
from pydantic import ValidationError

from cardcreator.schemas.profile_schema import (
    PlacementType,
    ProfilePatch,
    ProfileRecord,
    apply_patch,
    normalize_url,
)


@pytest.mark.parametrize("raw, expected", [
    ("linkedin.com/in/anali", "https://linkedin.com/in/anali"),
    ("  www.example.com  ", "https://www.example.com"),
    ("https://example.com", "https://example.com"),
    ("http://example.com", "http://example.com"),
    ("HTTPS://Example.com", "HTTPS://Example.com"),
    ("//cdn.example.com/x", "https://cdn.example.com/x"),
    ("", ""),
    ("   ", ""),
    (None, ""),
])
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize("raw", ["linkedin.com/in/x", "https://a.b", "http://a.b", "", " x ", "ftp://a"])
def test_normalize_url_is_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once


def test_new_record_defaults():
    record = ProfileRecord.new()
    assert record.core_skills == ["", "", ""]
    assert record.highlights == [""]
    assert record.placement_type is PlacementType.CONTRACTOR
    assert record.profile_image_payload is None
    assert record.is_empty


@pytest.mark.parametrize("skills, expected", [
    ([], ["", "", ""]),
    (["React"], ["React", "", ""]),
    (["React", "Go", "Rust"], ["React", "Go", "Rust"]),
    (["React", "Go", "Rust", "Elm"], ["React", "Go", "Rust"]),
])
def test_core_skills_always_three(skills, expected):
    assert ProfileRecord(core_skills=skills).core_skills == expected


def test_skill_labels_fill_blank_slots():
    record = ProfileRecord(core_skills=["Go", "", "  "])
    assert record.skill_labels == ["Go", "Skill 2", "Skill 3"]


def test_blank_highlights_are_kept_but_not_visible():
    record = ProfileRecord(highlights=["", "Led team", "  "])
    assert record.highlights == ["", "Led team", "  "]
    assert record.visible_highlights == ["Led team"]


def test_camel_case_form_data_is_accepted():
    record = ProfileRecord.from_form_data({
        "name": "  Ana Li ",
        "linkedin": "linkedin.com/in/anali",
        "resumeLink": "example.com/cv.pdf",
        "portfolioLink": "example.com",
        "profileImage": "",
        "placementType": "Direct Placement",
    })
    assert record.name == "Ana Li"
    assert record.linkedin_url == "linkedin.com/in/anali"
    assert record.resume_url == "example.com/cv.pdf"
    assert record.portfolio_url == "example.com"
    assert record.profile_image_payload is None
    assert record.placement_type is PlacementType.DIRECT_PLACEMENT


@pytest.mark.parametrize("raw, expected", [
    ("Contractor", PlacementType.CONTRACTOR),
    ("DirectPlacement", PlacementType.DIRECT_PLACEMENT),
    ("contract_to_hire", PlacementType.CONTRACT_TO_HIRE),
    ("Contract-To-Hire", PlacementType.CONTRACT_TO_HIRE),
    ("Freelance", None),
    (3, None),
])
def test_placement_type_parse(raw, expected):
    assert PlacementType.parse(raw) is expected


@pytest.mark.parametrize("data", [{}, {"placementType": ""}, {"placementType": "  "}])
def test_missing_placement_defaults_to_contractor(data):
    record = ProfileRecord.from_form_data({"name": "Ana", **data})
    assert record.placement_type is PlacementType.CONTRACTOR


def test_unknown_placement_is_kept_as_none():
    record = ProfileRecord.from_form_data({"name": "Ana", "placementType": "Freelancer"})
    assert record.placement_type is None

    # Round trips used by history and field edits keep the record pill-less
    assert ProfileRecord.model_validate(record.model_dump()).placement_type is None
    assert ProfileRecord.model_validate(record.model_dump(mode="json")).placement_type is None
    assert apply_patch(record, ProfilePatch(name="Bo")).placement_type is None


def test_placement_asset_keys():
    assert PlacementType.CONTRACT_TO_HIRE.asset_key == "status.contract_to_hire"


def test_record_is_frozen():
    record = ProfileRecord(name="Ana")
    with pytest.raises(ValidationError):
        record.name = "Bob"


def test_snapshot_is_detached():
    record = ProfileRecord(highlights=["One"])
    copy = record.snapshot()
    record.highlights.append("Two")
    assert copy.highlights == ["One"]


def test_apply_patch_merges_non_empty_values():
    record = ProfileRecord(name="Ana", position="Engineer", core_skills=["Go"])
    patch = ProfilePatch.model_validate({
        "name": "",
        "position": "Staff Engineer",
        "linkedin": "linkedin.com/in/ana",
        "coreSkills": ["Python", "SQL", "Go", "Rust"],
        "highlights": [],
    })
    updated = apply_patch(record, patch)
    assert updated.name == "Ana"
    assert updated.position == "Staff Engineer"
    assert updated.linkedin_url == "linkedin.com/in/ana"
    assert updated.core_skills == ["Python", "SQL", "Go"]
    assert updated.highlights == [""]
    assert record.position == "Engineer"


def test_apply_empty_patch_returns_same_record():
    record = ProfileRecord(name="Ana")
    assert apply_patch(record, ProfilePatch()) is record


def test_patch_rejects_wrong_types():
    with pytest.raises(ValidationError):
        ProfilePatch.model_validate({"name": ["not", "a", "string"]})
    with pytest.raises(ValidationError):
        ProfilePatch.model_validate({"highlights": [1, 2]})
