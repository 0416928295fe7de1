# app/core/storage_utils.py
import logging
import uuid
from functools import lru_cache
from typing import Protocol

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """Operations the API needs from object storage."""

    def upload(self, key: str, file_bytes: bytes, content_type: str) -> str:
        ...

    def check_bucket(self) -> bool:
        ...


class SupabaseStorage:
    """
    Object storage backed by a Supabase Storage bucket.

    Public URLs are built from `public_url` when configured (CDN /
    custom domain in front of the bucket), otherwise from the Supabase
    public object URL.
    """

    def __init__(self, bucket: str, public_url: str | None = None):
        self.bucket = bucket
        self.public_url = public_url.rstrip("/") if public_url else None

    def upload(self, key: str, file_bytes: bytes, content_type: str) -> str:
        """
        Upload raw bytes and return the public URL of the object.

        If an object already exists at this key it is overwritten.

        Raises:
            Any exception raised by the Supabase client if upload fails.
        """
        bucket = supabase_admin().storage.from_(self.bucket)
        bucket.upload(key, file_bytes, {"content-type": content_type, "upsert": "true"})
        if self.public_url:
            return f"{self.public_url}/{key}"
        return bucket.get_public_url(key)

    def check_bucket(self) -> bool:
        """Startup check: is the bucket reachable with our credentials?"""
        try:
            supabase_admin().storage.get_bucket(self.bucket)
        except Exception as e:
            logger.error("Storage bucket %r unreachable: %s", self.bucket, e)
            return False
        return True


@lru_cache
def get_storage() -> StorageClient:
    """FastAPI dependency returning the process-wide storage client."""
    settings = get_settings()
    return SupabaseStorage(settings.STORAGE_BUCKET, settings.STORAGE_PUBLIC_URL)


def generate_key(filename: str | None) -> str:
    """
    Random object key keeping the original extension.

    Examples:
        "flyer.png" -> "<uuid4>.png"
        "noext"     -> "<uuid4>.jpg"
    """
    ext = "jpg"
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower() or "jpg"
    return f"{uuid.uuid4()}.{ext}"
