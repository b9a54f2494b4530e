import logging

from api.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from api.security import create_access_token, hash_password, verify_password
from errors import ConflictError, InvalidCredentialsError, UserNotFoundError
from profile_projection import project_user
from user_store import find_user_by_email, find_user_by_id, find_user_by_username, insert_user
from utils import normalize_phone

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def register_user(request: RegisterRequest) -> RegisterResponse:
    username = request.username.strip()
    email = _normalize_email(request.email)

    if find_user_by_username(username):
        raise ConflictError("Username already taken")
    if find_user_by_email(email):
        raise ConflictError("Email already registered")

    user_data = {
        "username": username,
        "email": email,
        "password": hash_password(request.password),
    }
    if request.phone and request.phone.strip():
        user_data["phone"] = normalize_phone(request.phone)

    user = insert_user(user_data)
    logger.info("User registered user_id=%s", user["_id"])
    return RegisterResponse(message="User registered successfully", user=project_user(user))


def login_user(request: LoginRequest) -> LoginResponse:
    identifier = request.username.strip()
    user = find_user_by_username(identifier)
    if user is None and "@" in identifier:
        user = find_user_by_email(_normalize_email(identifier))

    if user is None or not verify_password(request.password, user.get("password", "")):
        logger.info("Login rejected identifier=%s", identifier)
        raise InvalidCredentialsError("Invalid username or password")

    token = create_access_token(str(user["_id"]))
    return LoginResponse(message="Login successful", token=token, user=project_user(user))


def get_current_user(user_id: str) -> dict:
    user = find_user_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    return project_user(user)
