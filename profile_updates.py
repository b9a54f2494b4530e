from dataclasses import dataclass, field
from typing import Any, Mapping

from errors import ValidationError
from utils import (
    LONG_TEXT,
    SHORT_TEXT,
    UNSET,
    URL_TEXT,
    clamp_text,
    clean_tags,
    is_blank,
    normalize_phone,
    parse_flexible_date,
    to_number_or_unset,
)


WORK_MODES = ("remote", "on site", "hybrid")
AVAILABILITY_OPTIONS = ["open", "actively-looking", "not-looking", "unavailable"]
JOB_TYPE_OPTIONS = ["full-time", "part-time", "contract", "internship", "freelance"]


@dataclass(frozen=True)
class FieldSpec:
    kind: str = "text"
    max_length: int = SHORT_TEXT
    choices: tuple[str, ...] = ()
    default: Any = ""


@dataclass
class FieldMutation:
    to_set: dict[str, Any] = field(default_factory=dict)
    to_unset: set[str] = field(default_factory=set)


@dataclass
class ArrayDiff:
    add_to_set: list[str] = field(default_factory=list)
    pull: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.add_to_set and not self.pull


@dataclass(frozen=True)
class CollectionSpec:
    key: str
    label: str
    fields: Mapping[str, FieldSpec]


PROFILE_FIELDS: dict[str, FieldSpec] = {
    "phone": FieldSpec(kind="phone"),
    "address": FieldSpec(max_length=300),
    "locationText": FieldSpec(),
    "avatarUrl": FieldSpec(max_length=URL_TEXT),
    "title": FieldSpec(),
    "summary": FieldSpec(max_length=LONG_TEXT),
    "hourlyRate": FieldSpec(kind="number", default=None),
    "availability": FieldSpec(),
    "jobType": FieldSpec(),
    # legacy plain-text fallbacks; new clients use the *Items collections
    "education": FieldSpec(max_length=LONG_TEXT),
    "experience": FieldSpec(max_length=LONG_TEXT),
}

EXPERIENCE_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec(),
    "company": FieldSpec(),
    "startDate": FieldSpec(kind="date", default=None),
    "endDate": FieldSpec(kind="date", default=None),
    "ongoing": FieldSpec(kind="flag", default=False),
    "location": FieldSpec(),
    "workMode": FieldSpec(kind="choice", choices=WORK_MODES),
    "description": FieldSpec(max_length=LONG_TEXT),
}

EDUCATION_FIELDS: dict[str, FieldSpec] = {
    "degree": FieldSpec(),
    "school": FieldSpec(),
    "location": FieldSpec(),
    "startDate": FieldSpec(kind="date", default=None),
    "endDate": FieldSpec(kind="date", default=None),
    "ongoing": FieldSpec(kind="flag", default=False),
    "description": FieldSpec(max_length=LONG_TEXT),
}

ITEM_COLLECTIONS: dict[str, CollectionSpec] = {
    "experience": CollectionSpec(key="experienceItems", label="Experience", fields=EXPERIENCE_FIELDS),
    "education": CollectionSpec(key="educationItems", label="Education", fields=EDUCATION_FIELDS),
}

# collection key -> (add list, remove list, full-replacement names)
ARRAY_FIELDS: dict[str, tuple[str, str, tuple[str, ...]]] = {
    "skills": ("addSkills", "removeSkills", ("skills",)),
    "certifications": ("addCertificates", "removeCertificates", ("certifications", "certificates")),
}


def normalize_field(name: str, spec: FieldSpec, raw: Any) -> Any:
    """Return the stored form of ``raw`` for ``spec``, or UNSET when it normalizes to nothing."""
    if spec.kind == "number":
        return to_number_or_unset(raw)
    if spec.kind == "phone":
        return normalize_phone(raw)
    if spec.kind == "date":
        parsed = parse_flexible_date(raw)
        return UNSET if parsed is None else parsed
    if spec.kind == "flag":
        if not isinstance(raw, bool):
            raise ValidationError(f"{name} must be true or false")
        return raw
    if spec.kind == "choice":
        value = clamp_text(raw, spec.max_length)
        if value == "":
            return UNSET
        if value not in spec.choices:
            raise ValidationError(f"{name} must be one of: {', '.join(spec.choices)}")
        return value

    value = clamp_text(raw, spec.max_length)
    return UNSET if value == "" else value


def resolve_partial_update(writable_fields: Mapping[str, FieldSpec], submitted: Mapping[str, Any]) -> FieldMutation:
    mutation = FieldMutation()
    for name, raw in (submitted or {}).items():
        spec = writable_fields.get(name)
        if spec is None:
            continue
        if is_blank(raw):
            mutation.to_unset.add(name)
            continue

        value = normalize_field(name, spec, raw)
        if value is UNSET:
            mutation.to_unset.add(name)
        else:
            mutation.to_set[name] = value

    if not mutation.to_set and not mutation.to_unset:
        raise ValidationError("No valid fields to update")
    return mutation


def _apply_ongoing_rule(values: dict[str, Any], submitted: Mapping[str, Any]) -> None:
    if values.get("ongoing") is True:
        values["endDate"] = None
    elif values.get("endDate") is not None and "ongoing" not in submitted:
        values["ongoing"] = False


def build_new_item(fields: Mapping[str, FieldSpec], submitted: Mapping[str, Any]) -> dict[str, Any]:
    item = {name: spec.default for name, spec in fields.items()}
    for name, raw in (submitted or {}).items():
        spec = fields.get(name)
        if spec is None or is_blank(raw):
            continue
        value = normalize_field(name, spec, raw)
        if value is not UNSET:
            item[name] = value

    _apply_ongoing_rule(item, submitted or {})
    return item


def resolve_item_update(fields: Mapping[str, FieldSpec], submitted: Mapping[str, Any]) -> dict[str, Any]:
    # embedded items keep every key, so a cleared field falls back to its default
    mutation = resolve_partial_update(fields, submitted)
    values = dict(mutation.to_set)
    for name in mutation.to_unset:
        values[name] = fields[name].default

    _apply_ongoing_rule(values, submitted)
    return values


def reconcile_arrays(adds: Any, removes: Any) -> ArrayDiff:
    to_add = clean_tags(adds)
    to_remove = clean_tags(removes)
    # a tag named on both sides is removed
    return ArrayDiff(
        add_to_set=[tag for tag in to_add if tag not in to_remove],
        pull=to_remove,
    )


def diff_desired(original: Any, desired: Any) -> ArrayDiff:
    wanted = clean_tags(desired)
    current = [tag for tag in (original or []) if isinstance(tag, str)]
    return ArrayDiff(
        add_to_set=[tag for tag in wanted if tag not in current],
        pull=list(dict.fromkeys(tag for tag in current if tag not in wanted)),
    )


def build_array_update(changes: Mapping[str, Any], current: Mapping[str, Any] | None = None) -> dict[str, ArrayDiff]:
    diffs: dict[str, ArrayDiff] = {}
    for key, (add_name, remove_name, desired_names) in ARRAY_FIELDS.items():
        desired = next((changes[name] for name in desired_names if changes.get(name) is not None), None)
        if desired is not None:
            diff = diff_desired((current or {}).get(key), desired)
        else:
            diff = reconcile_arrays(changes.get(add_name), changes.get(remove_name))
        if not diff.is_empty:
            diffs[key] = diff

    if not diffs:
        raise ValidationError("No array changes provided")
    return diffs
