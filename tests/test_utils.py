from datetime import datetime

import pytest

from errors import ValidationError
from utils import (
    LONG_TEXT,
    TAG_TEXT,
    UNSET,
    clamp_text,
    clean_tags,
    normalize_phone,
    parse_flexible_date,
    to_number_or_unset,
)


def test_clamp_text_trims_and_truncates():
    assert clamp_text("  Engineer  ") == "Engineer"
    assert clamp_text("x" * 5000, LONG_TEXT) == "x" * LONG_TEXT


def test_clamp_text_passes_non_strings_through():
    assert clamp_text(42) == 42
    assert clamp_text(None) is None


@pytest.mark.parametrize("value", ["", None, "abc", True, "nan", "inf"])
def test_to_number_or_unset_rejects(value):
    assert to_number_or_unset(value) is UNSET


@pytest.mark.parametrize("value,expected", [("25", 25.0), ("12.5", 12.5), (40, 40.0), (0, 0.0)])
def test_to_number_or_unset_parses(value, expected):
    assert to_number_or_unset(value) == expected


def test_parse_flexible_date_expands_year_month():
    assert parse_flexible_date("2021-03") == datetime(2021, 3, 1)


def test_parse_flexible_date_accepts_iso_with_zulu():
    assert parse_flexible_date("2020-01-15T10:30:00Z") == datetime(2020, 1, 15, 10, 30)


@pytest.mark.parametrize("value", ["", None, "last spring", "2021-13", 2021])
def test_parse_flexible_date_falls_back_to_none(value):
    assert parse_flexible_date(value) is None


def test_clean_tags_dedupes_and_drops_empty():
    assert clean_tags([" Go ", "Go", "", "   ", 7, "Python"]) == ["Go", "Python"]
    assert clean_tags(["a" * 300]) == ["a" * TAG_TEXT]
    assert clean_tags(None) == []


def test_normalize_phone():
    assert normalize_phone("(555) 123-4567") == "5551234567"
    with pytest.raises(ValidationError):
        normalize_phone("12345")
