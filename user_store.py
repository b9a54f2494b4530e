import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from bson import ObjectId
from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError

from errors import ConflictError

logger = logging.getLogger(__name__)

_client: MongoClient | None = None
_indexes_ready = False

HIDE_PASSWORD = {"password": 0}


def _get_client() -> MongoClient:
    global _client
    if _client is None:
        load_dotenv()
        mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        _client = MongoClient(mongo_uri)
    return _client


def _get_collection():
    global _indexes_ready
    load_dotenv()
    db_name = os.getenv("MONGODB_DB", "job_profiles")
    collection_name = os.getenv("MONGODB_COLLECTION", "users")
    collection = _get_client()[db_name][collection_name]
    if not _indexes_ready:
        collection.create_index([("username", ASCENDING)], unique=True)
        collection.create_index([("email", ASCENDING)], unique=True)
        _indexes_ready = True
    return collection


def _now() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> ObjectId | None:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _update_user(query: dict, update: dict) -> dict | None:
    update.setdefault("$set", {})["updatedAt"] = _now()
    return _get_collection().find_one_and_update(
        query,
        update,
        projection=HIDE_PASSWORD,
        return_document=ReturnDocument.AFTER,
    )


def insert_user(user_data: Mapping[str, Any]) -> dict:
    now = _now()
    payload = {
        "skills": [],
        "certifications": [],
        "experienceItems": [],
        "educationItems": [],
        **user_data,
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = _get_collection().insert_one(payload)
    except DuplicateKeyError as exc:
        raise ConflictError("User already exists") from exc

    payload["_id"] = result.inserted_id
    logger.info("User inserted user_id=%s", result.inserted_id)
    return payload


def find_user_by_id(user_id: Any, include_password: bool = False) -> dict | None:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    projection = None if include_password else HIDE_PASSWORD
    return _get_collection().find_one({"_id": oid}, projection)


def find_user_by_username(username: str) -> dict | None:
    return _get_collection().find_one({"username": username})


def find_user_by_email(email: str) -> dict | None:
    return _get_collection().find_one({"email": email})


def list_users() -> list[dict]:
    return list(_get_collection().find({}, HIDE_PASSWORD))


def search_users(term: str) -> list[dict]:
    pattern = {"$regex": re.escape(term), "$options": "i"}
    query = {"$or": [{"username": pattern}, {"email": pattern}]}
    return list(_get_collection().find(query, HIDE_PASSWORD))


def apply_field_mutation(user_id: Any, to_set: Mapping[str, Any], to_unset: set[str] | None = None) -> dict | None:
    oid = to_object_id(user_id)
    if oid is None:
        return None

    update: dict[str, Any] = {"$set": dict(to_set)}
    if to_unset:
        update["$unset"] = {name: "" for name in to_unset}
    return _update_user({"_id": oid}, update)


def apply_array_diff(user_id: Any, diffs: Mapping[str, Any]) -> dict | None:
    oid = to_object_id(user_id)
    if oid is None:
        return None

    add_ops = {key: {"$each": diff.add_to_set} for key, diff in diffs.items() if diff.add_to_set}
    pull_ops = {key: {"$in": diff.pull} for key, diff in diffs.items() if diff.pull}

    if not add_ops.keys() & pull_ops.keys():
        update: dict[str, Any] = {}
        if add_ops:
            update["$addToSet"] = add_ops
        if pull_ops:
            update["$pull"] = pull_ops
        return _update_user({"_id": oid}, update)

    # $addToSet and $pull on one path conflict in a single update, so pull runs second
    doc = None
    if add_ops:
        doc = _update_user({"_id": oid}, {"$addToSet": add_ops})
        if doc is None:
            return None
    if pull_ops:
        doc = _update_user({"_id": oid}, {"$pull": pull_ops})
    return doc


def push_item(user_id: Any, collection_key: str, item: Mapping[str, Any]) -> dict | None:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    return _update_user({"_id": oid}, {"$push": {collection_key: dict(item)}})


def set_item_fields(user_id: Any, collection_key: str, item_id: Any, values: Mapping[str, Any]) -> dict | None:
    oid = to_object_id(user_id)
    item_oid = to_object_id(item_id)
    if oid is None or item_oid is None:
        return None

    changes = {f"{collection_key}.$.{name}": value for name, value in values.items()}
    changes[f"{collection_key}.$.updatedAt"] = _now()
    return _update_user({"_id": oid, f"{collection_key}._id": item_oid}, {"$set": changes})


def pull_item(user_id: Any, collection_key: str, item_id: Any) -> dict | None:
    oid = to_object_id(user_id)
    item_oid = to_object_id(item_id)
    if oid is None or item_oid is None:
        return None
    return _update_user(
        {"_id": oid, f"{collection_key}._id": item_oid},
        {"$pull": {collection_key: {"_id": item_oid}}},
    )


def set_avatar(user_id: Any, avatar_url: str, avatar_id: str) -> dict | None:
    return apply_field_mutation(user_id, {"avatarUrl": avatar_url, "avatarId": avatar_id})
