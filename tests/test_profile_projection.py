from datetime import datetime, timezone

from bson import ObjectId

from profile_projection import project_user


def _stored_user():
    return {
        "_id": ObjectId(),
        "__v": 0,
        "username": "alice",
        "email": "alice@x.com",
        "password": "$2b$12$hash",
        "skills": ["Go"],
        "certifications": ["CKA"],
        "experienceItems": [
            {"_id": ObjectId(), "title": "Engineer", "startDate": datetime(2020, 1, 1), "endDate": None}
        ],
        "education": "legacy text",
        "createdAt": datetime(2024, 5, 1, tzinfo=timezone.utc),
    }


def test_secrets_and_legacy_fields_removed():
    public = project_user(_stored_user())
    assert "password" not in public
    assert "__v" not in public
    assert "education" not in public
    assert "_id" not in public


def test_legacy_fields_on_request():
    assert project_user(_stored_user(), include_legacy=True)["education"] == "legacy text"


def test_ids_dates_and_alias():
    doc = _stored_user()
    public = project_user(doc)
    assert public["id"] == str(doc["_id"])
    item = public["experienceItems"][0]
    assert item["id"] == str(doc["experienceItems"][0]["_id"])
    assert item["startDate"] == "2020-01-01T00:00:00"
    assert public["certificates"] == ["CKA"] == public["certifications"]
    assert public["hourlyRate"] is None
    assert public["educationItems"] == []


def test_projection_is_idempotent():
    once = project_user(_stored_user())
    assert project_user(once) == once


def test_none_passes_through():
    assert project_user(None) is None
