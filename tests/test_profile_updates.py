from datetime import datetime

import pytest

from errors import ValidationError
from profile_updates import (
    EDUCATION_FIELDS,
    EXPERIENCE_FIELDS,
    PROFILE_FIELDS,
    build_array_update,
    build_new_item,
    diff_desired,
    reconcile_arrays,
    resolve_item_update,
    resolve_partial_update,
)


def test_absent_fields_are_untouched():
    mutation = resolve_partial_update(PROFILE_FIELDS, {"title": "Backend dev"})
    assert mutation.to_set == {"title": "Backend dev"}
    assert mutation.to_unset == set()
    assert "summary" not in mutation.to_set and "summary" not in mutation.to_unset


def test_empty_values_are_unset():
    mutation = resolve_partial_update(PROFILE_FIELDS, {"summary": "", "address": None, "title": "   "})
    assert mutation.to_set == {}
    assert mutation.to_unset == {"summary", "address", "title"}


def test_hourly_rate_empty_is_unset_not_zero():
    mutation = resolve_partial_update(PROFILE_FIELDS, {"hourlyRate": ""})
    assert mutation.to_unset == {"hourlyRate"}

    mutation = resolve_partial_update(PROFILE_FIELDS, {"hourlyRate": "35"})
    assert mutation.to_set == {"hourlyRate": 35.0}


def test_unknown_fields_are_ignored():
    mutation = resolve_partial_update(PROFILE_FIELDS, {"username": "mallory", "password": "x", "title": "QA"})
    assert mutation.to_set == {"title": "QA"}


@pytest.mark.parametrize("submitted", [{}, {"username": "bob"}, {"email": "", "password": None}])
def test_no_valid_fields_rejected(submitted):
    with pytest.raises(ValidationError, match="No valid fields"):
        resolve_partial_update(PROFILE_FIELDS, submitted)


def test_phone_is_validated():
    assert resolve_partial_update(PROFILE_FIELDS, {"phone": "555 123 4567"}).to_set == {"phone": "5551234567"}
    with pytest.raises(ValidationError):
        resolve_partial_update(PROFILE_FIELDS, {"phone": "123"})


def test_reconcile_dedupes_adds():
    diff = reconcile_arrays(["Go", "Go", " "], [])
    assert diff.add_to_set == ["Go"]
    assert diff.pull == []


def test_reconcile_remove_wins_over_add():
    diff = reconcile_arrays(["Go", "Rust"], ["Go"])
    assert diff.add_to_set == ["Rust"]
    assert diff.pull == ["Go"]


def test_diff_desired():
    diff = diff_desired(["Go", "Python", "Go"], ["Python", "Rust"])
    assert diff.add_to_set == ["Rust"]
    assert diff.pull == ["Go"]


def test_build_array_update_mixes_both_shapes():
    diffs = build_array_update(
        {"addSkills": ["Go"], "certificates": ["AWS SAA"]},
        {"skills": [], "certifications": ["CKA"]},
    )
    assert diffs["skills"].add_to_set == ["Go"]
    assert diffs["certifications"].add_to_set == ["AWS SAA"]
    assert diffs["certifications"].pull == ["CKA"]


def test_build_array_update_rejects_no_changes():
    with pytest.raises(ValidationError, match="No array changes"):
        build_array_update({"addSkills": [], "removeSkills": ["", "  "]}, {})
    with pytest.raises(ValidationError):
        build_array_update({"skills": ["Go"]}, {"skills": ["Go"]})


def test_new_experience_item_defaults():
    item = build_new_item(EXPERIENCE_FIELDS, {"title": "Engineer"})
    assert item == {
        "title": "Engineer",
        "company": "",
        "startDate": None,
        "endDate": None,
        "ongoing": False,
        "location": "",
        "workMode": "",
        "description": "",
    }


def test_new_item_without_title_is_not_rejected():
    assert build_new_item(EDUCATION_FIELDS, {})["degree"] == ""


def test_new_item_parses_dates_and_ongoing_clears_end():
    item = build_new_item(EXPERIENCE_FIELDS, {"startDate": "2020-02", "endDate": "2022-01", "ongoing": True})
    assert item["startDate"] == datetime(2020, 2, 1)
    assert item["endDate"] is None
    assert item["ongoing"] is True


def test_invalid_work_mode_rejected():
    with pytest.raises(ValidationError):
        build_new_item(EXPERIENCE_FIELDS, {"workMode": "moon base"})


def test_item_update_resets_cleared_fields_to_default():
    values = resolve_item_update(EXPERIENCE_FIELDS, {"company": "", "startDate": None, "location": "Berlin"})
    assert values == {"company": "", "startDate": None, "location": "Berlin"}


def test_item_update_end_date_ends_ongoing():
    values = resolve_item_update(EDUCATION_FIELDS, {"endDate": "2019-06"})
    assert values == {"endDate": datetime(2019, 6, 1), "ongoing": False}
