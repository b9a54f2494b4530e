from bson import ObjectId

import user_store
from profile_updates import ArrayDiff


def _count_writes(collection, monkeypatch):
    calls = []
    original = collection.find_one_and_update

    def counting(*args, **kwargs):
        calls.append(args[1])
        return original(*args, **kwargs)

    monkeypatch.setattr(collection, "find_one_and_update", counting)
    return calls


def test_array_diff_on_separate_keys_is_one_write(collection, monkeypatch):
    oid = collection.insert_one({"skills": ["Go"], "certifications": []}).inserted_id
    calls = _count_writes(collection, monkeypatch)

    doc = user_store.apply_array_diff(
        str(oid),
        {"skills": ArrayDiff(pull=["Go"]), "certifications": ArrayDiff(add_to_set=["CKA"])},
    )
    assert len(calls) == 1
    assert doc["skills"] == [] and doc["certifications"] == ["CKA"]


def test_array_diff_on_same_key_pulls_after_add(collection, monkeypatch):
    oid = collection.insert_one({"skills": ["Go"]}).inserted_id
    calls = _count_writes(collection, monkeypatch)

    doc = user_store.apply_array_diff(str(oid), {"skills": ArrayDiff(add_to_set=["Rust"], pull=["Go"])})
    assert len(calls) == 2
    assert "$addToSet" in calls[0] and "$pull" in calls[1]
    assert doc["skills"] == ["Rust"]


def test_item_writes_ignore_malformed_ids(collection):
    oid = collection.insert_one({"experienceItems": [{"_id": ObjectId(), "title": "x"}]}).inserted_id

    assert user_store.set_item_fields(str(oid), "experienceItems", "not-an-id", {"title": "y"}) is None
    assert user_store.pull_item(str(oid), "experienceItems", "not-an-id") is None
    assert collection.find_one({"_id": oid})["experienceItems"][0]["title"] == "x"
