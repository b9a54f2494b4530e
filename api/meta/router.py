from fastapi import APIRouter

from api.user.schemas import ProfileOptionsResponse
from profile_updates import AVAILABILITY_OPTIONS, JOB_TYPE_OPTIONS

router = APIRouter(prefix="/api/meta")


@router.get("/profile-options", response_model=ProfileOptionsResponse)
def profile_options_route() -> ProfileOptionsResponse:
    return ProfileOptionsResponse(availability=list(AVAILABILITY_OPTIONS), jobTypes=list(JOB_TYPE_OPTIONS))
