"""Object storage access for audio, cover art and profile images.

Works against any S3-compatible endpoint (Cloudflare R2 in production).
Only URL signing and deletion happen server side; clients upload and
stream directly using the presigned URLs returned here.
"""
from __future__ import annotations

import logging
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from src.core.config import settings


logger = logging.getLogger(__name__)

_client: Optional[BaseClient] = None

# Upload kind -> top-level key prefix; every key is namespaced by owner below it
KEY_PREFIXES = {
    "audio": "songs",
    "cover": "covers",
    "profile": "profile-images",
}


def get_storage_client() -> BaseClient:
    """Create (or reuse) the S3 client configured from settings."""

    global _client

    if _client is None:
        _client = boto3.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT_URL,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
            aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
            region_name=settings.STORAGE_REGION,
        )
    return _client


def get_presigned_url(key: str, expires_in: Optional[int] = None) -> str:
    client = get_storage_client()
    return client.generate_presigned_url(
        "get_object",
        Params={"Bucket": settings.STORAGE_BUCKET, "Key": key},
        ExpiresIn=expires_in or settings.PRESIGNED_URL_TTL_SECONDS,
    )


def get_presigned_upload_url(key: str, content_type: Optional[str] = None) -> str:
    client = get_storage_client()
    params = {"Bucket": settings.STORAGE_BUCKET, "Key": key}
    if content_type:
        params["ContentType"] = content_type
    return client.generate_presigned_url(
        "put_object",
        Params=params,
        ExpiresIn=settings.PRESIGNED_URL_TTL_SECONDS,
    )


def owner_prefix(kind: str, user_id: str) -> str:
    return f"{KEY_PREFIXES[kind]}/{user_id}/"


def is_owned_key(key: str, kind: str, user_id: str) -> bool:
    """True when ``key`` lives under the caller's namespace for ``kind``."""

    return key.startswith(owner_prefix(kind, user_id))


def delete_object(key: str) -> None:
    client = get_storage_client()
    client.delete_object(Bucket=settings.STORAGE_BUCKET, Key=key)


def resolve_avatar_url(image: Optional[str]) -> Optional[str]:
    """Turn a stored profile image reference into a URL.

    External URLs (e.g. OAuth provider avatars) pass through. Storage keys are
    signed; a signing failure yields ``None`` instead of failing the caller.
    """

    if not image:
        return None
    if image.startswith(("http://", "https://")):
        return image
    try:
        return get_presigned_url(image)
    except (BotoCoreError, ClientError) as exc:
        logger.warning(f"Could not sign avatar key {image!r}: {exc}")
        return None
