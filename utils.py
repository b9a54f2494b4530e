import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

from errors import ValidationError

logger = logging.getLogger(__name__)

SHORT_TEXT = 140
LONG_TEXT = 2000
TAG_TEXT = 120
URL_TEXT = 2048


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")
_PHONE_SEPARATORS = re.compile(r"[\s().+-]")


def is_blank(value: Any) -> bool:
    return value is None or value is UNSET or value == ""


def clamp_text(value: Any, max_length: int = SHORT_TEXT) -> Any:
    if not isinstance(value, str):
        return value
    return value.strip()[:max_length]


def to_number_or_unset(value: Any) -> float | _Unset:
    if is_blank(value) or isinstance(value, bool):
        return UNSET
    try:
        number = float(value)
    except (TypeError, ValueError):
        return UNSET
    if not math.isfinite(number):
        return UNSET
    return number


def parse_flexible_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if is_blank(value) or not isinstance(value, str):
        return None

    text = value.strip()
    if _YEAR_MONTH.match(text):
        text = f"{text}-01"
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Discarding unparseable date value=%r", value)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def clean_tags(values: Any) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    cleaned: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        tag = clamp_text(value, TAG_TEXT)
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def normalize_phone(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("Phone must be a string")
    digits = _PHONE_SEPARATORS.sub("", value)
    if not re.fullmatch(r"\d{10}", digits):
        raise ValidationError("Enter a 10-digit phone number")
    return digits
