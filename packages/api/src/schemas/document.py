# This project was developed with assistance from AI tools.
"""Document upload and listing schemas."""

from datetime import datetime

from db.enums import DocumentType
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class UploadUrlRequest(BaseModel):
    """Ask for a presigned PUT URL.

    Without ``application_id`` the object lands in the caller's draft area,
    which is how the intake wizard uploads before the application exists.
    """

    doc_type: DocumentType
    file_name: str = Field(min_length=1, max_length=255)
    content_type: str
    application_id: int | None = None


class UploadUrlResponse(BaseModel):
    upload_url: str
    object_key: str
    expires_in: int


class DocumentRegister(BaseModel):
    """Record an object the browser already uploaded."""

    doc_type: DocumentType
    object_key: str = Field(min_length=1, max_length=500)
    file_name: str | None = None
    content_type: str | None = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    doc_type: DocumentType
    file_name: str | None = None
    content_type: str | None = None
    uploaded_by: str | None = None
    created_at: datetime


class DocumentListResponse(BaseModel):
    data: list[DocumentResponse]
    pagination: Pagination


class DocumentDownloadResponse(BaseModel):
    document_id: int
    url: str
    expires_in: int
