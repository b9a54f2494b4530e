import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from api.security import get_current_user_id
from errors import ProfileError
from .service import get_current_user, login_user, register_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_route(request: RegisterRequest):
    try:
        return register_user(request)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail=f"Failed to register user: {exc}") from exc


@router.post("/login", response_model=LoginResponse)
def login_route(request: LoginRequest):
    try:
        return login_user(request)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Login failed")
        raise HTTPException(status_code=500, detail=f"Login failed: {exc}") from exc


@router.get("/me")
def me_route(user_id: str = Depends(get_current_user_id)):
    try:
        return get_current_user(user_id)
    except ProfileError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("Loading current user failed")
        raise HTTPException(status_code=500, detail=f"Failed to load user: {exc}") from exc
