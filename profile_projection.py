from datetime import datetime
from typing import Any, Mapping

from bson import ObjectId

SECRET_FIELDS = ("password", "__v")
LEGACY_FIELDS = ("education", "experience")
ITEM_KEYS = ("experienceItems", "educationItems")

PROFILE_DEFAULTS: dict[str, Any] = {
    "phone": "",
    "address": "",
    "locationText": "",
    "avatarUrl": "",
    "avatarId": "",
    "title": "",
    "summary": "",
    "hourlyRate": None,
    "availability": "",
    "jobType": "",
}


def _plain(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain(entry) for entry in value]
    if isinstance(value, Mapping):
        return _plain_record(value)
    return value


def _plain_record(record: Mapping[str, Any]) -> dict[str, Any]:
    plain = {key: _plain(value) for key, value in record.items() if key != "_id"}
    if "_id" in record:
        plain["id"] = str(record["_id"])
    return plain


def project_user(doc: Mapping[str, Any] | None, include_legacy: bool = False) -> dict[str, Any] | None:
    """Public view of a stored user document.

    The password hash is never part of the result. Embedded items are
    flattened to plain records with a string ``id``, and ``certifications``
    is mirrored under the older ``certificates`` name. Projecting an
    already projected user returns an equal dict.
    """
    if doc is None:
        return None

    hidden = SECRET_FIELDS if include_legacy else SECRET_FIELDS + LEGACY_FIELDS
    public = _plain_record({key: value for key, value in doc.items() if key not in hidden})

    for key, default in PROFILE_DEFAULTS.items():
        public.setdefault(key, default)
    public["skills"] = list(public.get("skills") or [])
    public["certifications"] = list(public.get("certifications") or [])
    public["certificates"] = list(public["certifications"])
    for key in ITEM_KEYS:
        public[key] = list(public.get(key) or [])
    return public
