import logging
import time
from datetime import datetime, timezone
from typing import Any, Mapping

from bson import ObjectId

from api.user.schemas import ArrayChangesRequest, PhotoUploadResponse, UserListResponse
from errors import ItemNotFoundError, UserNotFoundError, ValidationError
from image_store import ALLOWED_CONTENT_TYPES, MAX_UPLOAD_BYTES, upload_buffer
from profile_projection import project_user
from profile_updates import (
    ITEM_COLLECTIONS,
    PROFILE_FIELDS,
    build_array_update,
    build_new_item,
    resolve_item_update,
    resolve_partial_update,
)
from user_store import (
    apply_array_diff,
    apply_field_mutation,
    find_user_by_id,
    list_users,
    pull_item,
    push_item,
    search_users,
    set_avatar,
    set_item_fields,
)

logger = logging.getLogger(__name__)


def _require_user(doc: dict | None) -> dict:
    if doc is None:
        raise UserNotFoundError()
    return project_user(doc)


def list_directory() -> UserListResponse:
    users = [project_user(doc) for doc in list_users()]
    return UserListResponse(message="User list fetched successfully", users=users)


def search_directory(query: str | None) -> UserListResponse:
    term = (query or "").strip()
    if not term:
        raise ValidationError("Search query is required")
    users = [project_user(doc) for doc in search_users(term)]
    return UserListResponse(message=f'Found {len(users)} users matching "{term}"', users=users)


def get_user_profile(user_id: str, include_legacy: bool = False) -> dict:
    doc = find_user_by_id(user_id)
    if doc is None:
        raise UserNotFoundError()
    return project_user(doc, include_legacy=include_legacy)


def update_profile_fields(user_id: str, fields: Mapping[str, Any]) -> dict:
    mutation = resolve_partial_update(PROFILE_FIELDS, fields)
    doc = apply_field_mutation(user_id, mutation.to_set, mutation.to_unset)
    logger.info(
        "Profile updated user_id=%s set=%s unset=%s found=%s",
        user_id,
        sorted(mutation.to_set),
        sorted(mutation.to_unset),
        doc is not None,
    )
    return _require_user(doc)


def update_profile_arrays(user_id: str, request: ArrayChangesRequest) -> dict:
    current = find_user_by_id(user_id)
    if current is None:
        raise UserNotFoundError()

    diffs = build_array_update(request.model_dump(), current)
    doc = apply_array_diff(user_id, diffs)
    logger.info("Profile arrays updated user_id=%s collections=%s", user_id, sorted(diffs))
    return _require_user(doc)


def _missing_item(user_id: str, label: str) -> Exception:
    if find_user_by_id(user_id) is None:
        return UserNotFoundError()
    return ItemNotFoundError(f"{label} not found")


def add_item(user_id: str, collection: str, fields: Mapping[str, Any]) -> dict:
    spec = ITEM_COLLECTIONS[collection]
    now = datetime.now(timezone.utc)
    item = {"_id": ObjectId(), **build_new_item(spec.fields, fields), "createdAt": now, "updatedAt": now}

    doc = push_item(user_id, spec.key, item)
    logger.info("Item added user_id=%s collection=%s item_id=%s", user_id, spec.key, item["_id"])
    return _require_user(doc)


def update_item(user_id: str, collection: str, item_id: str, fields: Mapping[str, Any]) -> dict:
    spec = ITEM_COLLECTIONS[collection]
    values = resolve_item_update(spec.fields, fields)

    doc = set_item_fields(user_id, spec.key, item_id, values)
    if doc is None:
        raise _missing_item(user_id, spec.label)
    logger.info("Item updated user_id=%s collection=%s item_id=%s fields=%s", user_id, spec.key, item_id, sorted(values))
    return project_user(doc)


def delete_item(user_id: str, collection: str, item_id: str) -> dict:
    spec = ITEM_COLLECTIONS[collection]

    doc = pull_item(user_id, spec.key, item_id)
    if doc is None:
        raise _missing_item(user_id, spec.label)
    logger.info("Item deleted user_id=%s collection=%s item_id=%s", user_id, spec.key, item_id)
    return project_user(doc)


def upload_profile_photo(user_id: str, data: bytes, content_type: str | None) -> PhotoUploadResponse:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Only JPG and PNG allowed")
    if not data:
        raise ValidationError("No file uploaded")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError("File is larger than 5MB")
    if find_user_by_id(user_id) is None:
        raise UserNotFoundError()

    uploaded = upload_buffer(
        data,
        folder="profilepic",
        public_id=f"user_{user_id}_{int(time.time() * 1000)}",
    )
    user = _require_user(set_avatar(user_id, uploaded.public_url, uploaded.storage_id))
    return PhotoUploadResponse(success=True, avatarUrl=user["avatarUrl"], user=user)
