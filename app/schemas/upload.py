# app/schemas/upload.py
from sqlmodel import SQLModel


class UploadRead(SQLModel):
    """Result of a media upload to object storage."""

    success: bool = True
    url: str
    key: str
    filename: str
    mime_type: str
    size: int
