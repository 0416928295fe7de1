# app/routers/upload.py
from fastapi import APIRouter, Depends, File, UploadFile

from app.core.config import get_settings
from app.core.errors import ValidationFailed
from app.core.storage_utils import StorageClient, get_storage
from app.schemas.upload import UploadRead
from app.services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["Upload"])

settings = get_settings()


@router.post("", response_model=UploadRead, summary="Upload an image or video")
def upload_file(
    file: UploadFile | None = File(None),
    storage: StorageClient = Depends(get_storage),
):
    """
    Upload a single media file to object storage.

    - Multipart field `file`.
    - Accepts image/* and video/*, up to 50MB.
    """
    if file is None:
        raise ValidationFailed("No file uploaded")

    # Read one byte past the limit so oversize files are detected
    # without buffering them entirely.
    file_bytes = file.file.read(settings.MAX_UPLOAD_BYTES + 1)

    service = UploadService(storage, settings.MAX_UPLOAD_BYTES)
    return service.upload(file.filename, file.content_type, file_bytes)
