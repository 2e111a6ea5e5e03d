"""
File uploads for template attachments.

Two backends:
  * an S3-compatible object store, signed by hand with AWS Signature V4
    (single PUT, no query string, payload hash sent in x-amz-content-sha256)
  * the storage service's own multipart upload API (X-API-Key auth)
"""

import hashlib
import hmac
import logging
import re
import time
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

import requests

from clients_finder.core.config import settings
from clients_finder.core.errors import ConfigurationError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

ALGORITHM = "AWS4-HMAC-SHA256"
SIGNED_HEADERS = "content-type;host;x-amz-content-sha256;x-amz-date"


def validate_upload(size: int, content_type: Optional[str]):
    if size > settings.MAX_UPLOAD_BYTES:
        raise ValidationError("File size must be less than 10MB")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Invalid file type. Allowed: images, PDF, Word, Excel")


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", name or "file")


def amz_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%dT%H%M%SZ")


# ---------------------------------------------------------
# AWS SIGNATURE V4
# ---------------------------------------------------------
def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def signing_key(secret_key: str, date_stamp: str, region: str, service: str = "s3") -> bytes:
    k_date = _hmac(f"AWS4{secret_key}".encode("utf-8"), date_stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, "aws4_request")


def sign_s3_request(
    method: str,
    path: str,
    payload: bytes,
    content_type: str,
    amz_date: str,
    host: str,
    access_key: str,
    secret_key: str,
    region: str,
) -> dict:
    """
    Returns the headers needed to send the request:
    Content-Type, x-amz-content-sha256, x-amz-date and Authorization.
    """
    date_stamp = amz_date[:8]
    payload_hash = hashlib.sha256(payload).hexdigest()

    canonical_headers = (
        f"content-type:{content_type}\n"
        f"host:{host}\n"
        f"x-amz-content-sha256:{payload_hash}\n"
        f"x-amz-date:{amz_date}\n"
    )
    canonical_request = "\n".join([
        method,
        path,
        "",  # no query string
        canonical_headers,
        SIGNED_HEADERS,
        payload_hash,
    ])

    credential_scope = f"{date_stamp}/{region}/s3/aws4_request"
    string_to_sign = "\n".join([
        ALGORITHM,
        amz_date,
        credential_scope,
        hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
    ])

    signature = hmac.new(
        signing_key(secret_key, date_stamp, region),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    authorization = (
        f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )

    return {
        "Content-Type": content_type,
        "x-amz-content-sha256": payload_hash,
        "x-amz-date": amz_date,
        "Authorization": authorization,
    }


class StorageService:
    def __init__(self):
        self.s3_endpoint = (settings.S3_ENDPOINT or "").rstrip("/")
        self.s3_bucket = settings.S3_BUCKET
        self.s3_access_key = settings.S3_ACCESS_KEY
        self.s3_secret_key = settings.S3_SECRET_KEY
        self.s3_region = settings.S3_REGION

        self.api_url = settings.STORAGE_API_URL
        self.base_url = (settings.STORAGE_BASE_URL or "").rstrip("/")
        self.api_key = settings.STORAGE_API_KEY
        self.project_name = settings.STORAGE_PROJECT_NAME

    # ---------------------------------------------------------
    # 1. S3-COMPATIBLE (signed PUT)
    # ---------------------------------------------------------
    def upload_to_s3(self, filename: str, data: bytes, content_type: str, amz_date: Optional[str] = None) -> dict:
        validate_upload(len(data), content_type)

        if not (self.s3_endpoint and self.s3_access_key and self.s3_secret_key):
            raise ConfigurationError("S3 storage not configured")

        object_name = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
        object_path = f"/{self.s3_bucket}/{object_name}"
        host = urlparse(self.s3_endpoint).netloc

        headers = sign_s3_request(
            "PUT",
            object_path,
            data,
            content_type,
            amz_date or amz_timestamp(),
            host,
            self.s3_access_key,
            self.s3_secret_key,
            self.s3_region,
        )

        url = f"{self.s3_endpoint}{object_path}"
        response = requests.put(url, data=data, headers=headers, timeout=60)
        if not response.ok:
            logger.error(f"❌ S3 upload error: {response.status_code} {response.text}")
            raise UpstreamError(f"S3 upload failed: {response.status_code} {response.reason}")

        logger.info(f"📦 Uploaded {filename} to {url}")
        # S3 answers with an empty body, the object URL is ours to build
        return {"url": url, "filename": filename, "size": len(data), "type": content_type}

    # ---------------------------------------------------------
    # 2. STORAGE UPLOAD API (multipart)
    # ---------------------------------------------------------
    def upload_to_storage_api(self, filename: str, data: bytes, content_type: str) -> dict:
        validate_upload(len(data), content_type)

        if not self.api_key:
            raise ConfigurationError("Storage API key not configured")
        if not self.api_url:
            raise ConfigurationError("Storage API URL not configured")

        try:
            response = requests.post(
                self.api_url,
                headers={"X-API-Key": self.api_key},
                data={"projectName": self.project_name},
                files={"files": (filename, data, content_type)},
                timeout=60,
            )
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise UpstreamError(f"Upload failed: {e}") from e

        files = result.get("files") or []
        if not result.get("success") or not files:
            raise UpstreamError(result.get("error") or "Upload failed")

        uploaded = files[0]
        if uploaded.get("media_url"):
            url = f"{self.base_url}{uploaded['media_url']}"
        else:
            url = f"{self.base_url}/api/images/{self.project_name}/{uploaded.get('filename')}"

        return {
            "url": url,
            "filename": uploaded.get("originalFilename") or uploaded.get("filename") or filename,
            "size": uploaded.get("size") or len(data),
            "type": uploaded.get("mimetype") or content_type,
        }
