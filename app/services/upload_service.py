# app/services/upload_service.py
import logging

from fastapi import HTTPException, status

from app.core.errors import UpstreamFailure, ValidationFailed
from app.core.storage_utils import StorageClient, generate_key
from app.schemas.upload import UploadRead

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_PREFIXES = ("image/", "video/")


class UploadService:
    """
    Proxies media uploads (event flyers, videos, gallery images) to
    object storage.
    """

    def __init__(self, storage: StorageClient, max_bytes: int):
        self.storage = storage
        self.max_bytes = max_bytes

    def _validate(self, content_type: str | None, file_bytes: bytes) -> str:
        if not content_type or not content_type.startswith(ALLOWED_MEDIA_PREFIXES):
            raise ValidationFailed("Only images and videos are allowed")

        if len(file_bytes) > self.max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large (max {self.max_bytes // (1024 * 1024)}MB).",
            )
        return content_type

    def upload(
        self,
        filename: str | None,
        content_type: str | None,
        file_bytes: bytes,
    ) -> UploadRead:
        """
        Validate and store one file under a random key.

        Raises:
            ValidationFailed(400): not an image/video.
            HTTPException(413): over the size limit.
            UpstreamFailure(502): the storage delegate failed.
        """
        mime_type = self._validate(content_type, file_bytes)
        key = generate_key(filename)

        try:
            url = self.storage.upload(key, file_bytes, mime_type)
        except Exception:
            logger.exception("Upload of %s failed", key)
            raise UpstreamFailure(
                "Failed to upload file", status_code=status.HTTP_502_BAD_GATEWAY
            )

        return UploadRead(
            url=url,
            key=key,
            filename=filename or key,
            mime_type=mime_type,
            size=len(file_bytes),
        )
