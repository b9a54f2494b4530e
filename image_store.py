import hashlib
import logging
import os
import time
from dataclasses import dataclass

import httpx
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


CLOUDINARY_BASE_URL = "https://api.cloudinary.com/v1_1"
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class ImageUploadError(RuntimeError):
    pass


@dataclass
class UploadedImage:
    public_url: str
    storage_id: str


def _require_cloudinary_config() -> tuple[str, str, str]:
    load_dotenv()
    cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME")
    api_key = os.getenv("CLOUDINARY_API_KEY")
    api_secret = os.getenv("CLOUDINARY_API_SECRET")
    if not (cloud_name and api_key and api_secret):
        raise RuntimeError(
            "Missing Cloudinary configuration. Set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY "
            "and CLOUDINARY_API_SECRET in your environment or .env file."
        )
    return cloud_name, api_key, api_secret


def sign_params(params: dict[str, str], api_secret: str) -> str:
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def upload_buffer(
    data: bytes,
    *,
    folder: str,
    public_id: str,
    target_size: int = 1600,
    timeout_seconds: float = 60.0,
) -> UploadedImage:
    cloud_name, api_key, api_secret = _require_cloudinary_config()
    upload_url = f"{CLOUDINARY_BASE_URL}/{cloud_name}/image/upload"

    params = {
        "folder": folder,
        "public_id": public_id,
        "timestamp": str(int(time.time())),
        "transformation": f"c_fill,g_auto,h_{target_size},w_{target_size}/q_auto,f_auto",
    }
    form = {**params, "api_key": api_key, "signature": sign_params(params, api_secret)}

    logger.info("Cloudinary upload folder=%s public_id=%s bytes=%d", folder, public_id, len(data))
    try:
        with httpx.Client(timeout=timeout_seconds) as client:
            resp = client.post(upload_url, data=form, files={"file": (public_id, data)})
    except httpx.HTTPError as exc:
        logger.exception("Cloudinary request failed public_id=%s", public_id)
        raise ImageUploadError(f"Image upload failed: {exc}") from exc

    logger.info("Cloudinary upload returned status=%d", resp.status_code)
    if resp.status_code >= 400:
        logger.error("Cloudinary error response: %s", resp.text[:1000])
        raise ImageUploadError(f"Image upload failed: HTTP {resp.status_code} - {resp.text[:500]}")

    body = resp.json()
    secure_url = body.get("secure_url")
    storage_id = body.get("public_id")
    if not secure_url or not storage_id:
        raise ImageUploadError("Image upload response is missing secure_url or public_id.")
    return UploadedImage(public_url=secure_url, storage_id=storage_id)
