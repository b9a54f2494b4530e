import logging
from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from api.user.schemas import (
    ArrayChangesRequest,
    EducationItemRequest,
    ExperienceItemRequest,
    PhotoUploadResponse,
    ProfileUpdateRequest,
    UserListResponse,
)
from image_store import MAX_UPLOAD_BYTES
from errors import ProfileError
from .service import (
    add_item,
    delete_item,
    get_user_profile,
    list_directory,
    search_directory,
    update_item,
    update_profile_arrays,
    update_profile_fields,
    upload_profile_photo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user")


@router.get("/userslist", response_model=UserListResponse)
def users_list_route():
    try:
        return list_directory()
    except Exception as exc:
        logger.exception("Listing users failed")
        raise HTTPException(status_code=500, detail=f"Failed to list users: {exc}") from exc


@router.get("/search", response_model=UserListResponse)
def search_route(query: str | None = Query(default=None)):
    try:
        return search_directory(query)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("User search failed query=%s", query)
        raise HTTPException(status_code=500, detail=f"Server error during user search: {exc}") from exc


@router.get("/profile/{user_id}")
def get_profile_route(user_id: str, includeLegacy: bool = Query(default=False)):
    try:
        return get_user_profile(user_id, include_legacy=includeLegacy)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Loading profile failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to load profile: {exc}") from exc


@router.patch("/profile/{user_id}")
def update_profile_route(user_id: str, request: ProfileUpdateRequest):
    try:
        return update_profile_fields(user_id, request.model_dump(exclude_unset=True))
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Updating profile failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to update profile: {exc}") from exc


@router.patch("/profile/{user_id}/arrays")
def update_arrays_route(user_id: str, request: ArrayChangesRequest):
    try:
        return update_profile_arrays(user_id, request)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Updating arrays failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to update arrays: {exc}") from exc


@router.post("/profile/{user_id}/experience")
def add_experience_route(user_id: str, request: ExperienceItemRequest):
    try:
        return add_item(user_id, "experience", request.model_dump(exclude_unset=True))
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Adding experience failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to add experience: {exc}") from exc


@router.put("/profile/{user_id}/experience/{item_id}")
def update_experience_route(user_id: str, item_id: str, request: ExperienceItemRequest):
    try:
        return update_item(user_id, "experience", item_id, request.model_dump(exclude_unset=True))
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Updating experience failed user_id=%s item_id=%s", user_id, item_id)
        raise HTTPException(status_code=500, detail=f"Failed to update experience: {exc}") from exc


@router.delete("/profile/{user_id}/experience/{item_id}")
def delete_experience_route(user_id: str, item_id: str):
    try:
        return delete_item(user_id, "experience", item_id)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Deleting experience failed user_id=%s item_id=%s", user_id, item_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete experience: {exc}") from exc


@router.post("/profile/{user_id}/education")
def add_education_route(user_id: str, request: EducationItemRequest):
    try:
        return add_item(user_id, "education", request.model_dump(exclude_unset=True))
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Adding education failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to add education: {exc}") from exc


@router.put("/profile/{user_id}/education/{item_id}")
def update_education_route(user_id: str, item_id: str, request: EducationItemRequest):
    try:
        return update_item(user_id, "education", item_id, request.model_dump(exclude_unset=True))
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Updating education failed user_id=%s item_id=%s", user_id, item_id)
        raise HTTPException(status_code=500, detail=f"Failed to update education: {exc}") from exc


@router.delete("/profile/{user_id}/education/{item_id}")
def delete_education_route(user_id: str, item_id: str):
    try:
        return delete_item(user_id, "education", item_id)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Deleting education failed user_id=%s item_id=%s", user_id, item_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete education: {exc}") from exc


@router.post("/profile/{user_id}/photo", response_model=PhotoUploadResponse)
def upload_photo_route(user_id: str, file: UploadFile = File(...)):
    try:
        data = file.file.read(MAX_UPLOAD_BYTES + 1)
        return upload_profile_photo(user_id, data, file.content_type)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Photo upload failed user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to upload photo: {exc}") from exc
