# This project was developed with assistance from AI tools.
"""Document upload, registration, listing and download routes."""

from db import get_db
from db.enums import DocumentType, UserRole
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import STAFF_ROLES
from ..core.config import settings
from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.document import (
    DocumentDownloadResponse,
    DocumentListResponse,
    DocumentRegister,
    DocumentResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)
from ..services import document as doc_service
from ..services.document import DocumentUploadError

router = APIRouter()

# Relationship managers attach intake documents; analysts attach analysis documents.
_UPLOAD_ROLES = (
    UserRole.ADMIN,
    UserRole.RELATIONSHIP_MANAGER,
    UserRole.CREDIT_ANALYST,
)


def _app_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


@router.post(
    "/documents/upload-url",
    response_model=UploadUrlResponse,
    dependencies=[Depends(require_roles(*_UPLOAD_ROLES))],
)
async def create_upload_url(
    body: UploadUrlRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> UploadUrlResponse:
    """Presigned PUT URL. Without ``application_id`` the object goes to the caller's drafts."""
    try:
        result = await doc_service.create_upload_url(session, user, body)
    except DocumentUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if result is None:
        raise _app_not_found()
    url, object_key = result
    return UploadUrlResponse(
        upload_url=url, object_key=object_key, expires_in=settings.PRESIGNED_URL_TTL
    )


@router.post(
    "/applications/{application_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_UPLOAD_ROLES))],
)
async def register_document(
    application_id: int,
    body: DocumentRegister,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    """Attach an object uploaded through a presigned URL."""
    try:
        doc = await doc_service.register_document(session, user, application_id, body)
    except DocumentUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if doc is None:
        raise _app_not_found()
    return DocumentResponse.model_validate(doc)


@router.post(
    "/applications/{application_id}/documents/upload",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_UPLOAD_ROLES))],
)
async def upload_document(
    application_id: int,
    user: CurrentUser,
    file: UploadFile = File(...),
    doc_type: DocumentType = Form(...),
    session: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    """Upload the file through the API instead of a presigned URL."""
    content_type = file.content_type or ""
    if content_type not in doc_service.ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported file type: {content_type}. "
            f"Allowed: {', '.join(sorted(doc_service.ALLOWED_CONTENT_TYPES))}",
        )

    file_data = await file.read()
    try:
        doc = await doc_service.upload_document(
            session=session,
            user=user,
            application_id=application_id,
            doc_type=doc_type,
            filename=file.filename or "document",
            content_type=content_type,
            file_data=file_data,
        )
    except DocumentUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(exc),
        ) from exc
    if doc is None:
        raise _app_not_found()
    return DocumentResponse.model_validate(doc)


@router.get(
    "/applications/{application_id}/documents",
    response_model=DocumentListResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def list_documents(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    doc_type: DocumentType | None = None,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=settings.MAX_PAGE_SIZE),
) -> DocumentListResponse:
    documents, total = await doc_service.list_documents(
        session, user, application_id, doc_type=doc_type, offset=offset, limit=limit
    )
    return DocumentListResponse(
        data=[DocumentResponse.model_validate(doc) for doc in documents],
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + limit < total),
        ),
    )


@router.get(
    "/documents/{document_id}/download",
    response_model=DocumentDownloadResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def download_document(
    document_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DocumentDownloadResponse:
    """Short-lived presigned GET URL for the stored object."""
    result = await doc_service.get_download_url(session, user, document_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    doc, url = result
    return DocumentDownloadResponse(
        document_id=doc.id, url=url, expires_in=settings.PRESIGNED_URL_TTL
    )
