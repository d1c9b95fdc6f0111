# This project was developed with assistance from AI tools.
"""Document storage for loan applications.

Two upload paths exist. The browser can ask for a presigned PUT URL and
then register the uploaded object, or it can post the bytes to the API,
which writes them to storage itself. Objects for an existing application
live under its reference number; objects uploaded during intake live in
the uploader's draft area until the application is created.
"""

import logging

from db import Document, LoanApplication
from db.enums import DocumentType
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..schemas.auth import UserContext
from ..schemas.document import DocumentRegister, UploadUrlRequest
from ..services.application import get_application
from ..services.scope import apply_data_scope
from ..services.storage import StorageService, get_storage_service

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/png",
}


class DocumentUploadError(Exception):
    """Raised when a document upload fails validation."""


def _check_content_type(content_type: str | None) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise DocumentUploadError(
            f"Unsupported content type: {content_type}. "
            f"Allowed: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )


async def create_upload_url(
    session: AsyncSession,
    user: UserContext,
    body: UploadUrlRequest,
) -> tuple[str, str] | None:
    """Return (upload_url, object_key) for a presigned browser upload.

    Returns None when ``application_id`` names an application the caller
    cannot see.
    """
    _check_content_type(body.content_type)

    if body.application_id is None:
        owner = StorageService.draft_owner(user.user_id)
    else:
        app = await get_application(session, user, body.application_id)
        if app is None:
            return None
        owner = app.application_reference_number

    storage = get_storage_service()
    object_key = storage.build_object_key(owner, body.doc_type.value, body.file_name)
    url = await storage.get_upload_url(
        object_key, body.content_type, expires_in=settings.PRESIGNED_URL_TTL
    )
    logger.debug("Issued upload URL for %s", object_key)
    return url, object_key


async def register_document(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    body: DocumentRegister,
) -> Document | None:
    """Record an object already uploaded through a presigned URL."""
    app = await get_application(session, user, application_id)
    if app is None:
        return None

    allowed_prefixes = (
        f"{app.application_reference_number}/",
        StorageService.draft_owner(user.user_id) + "/",
    )
    if not body.object_key.startswith(allowed_prefixes):
        raise DocumentUploadError(
            f"Object key {body.object_key} does not belong to this application"
        )

    storage = get_storage_service()
    if not await storage.object_exists(body.object_key):
        raise DocumentUploadError(f"Object {body.object_key} has not been uploaded")

    doc = Document(
        application_id=application_id,
        doc_type=body.doc_type,
        object_key=body.object_key,
        file_name=body.file_name,
        content_type=body.content_type,
        uploaded_by=user.user_id,
    )
    session.add(doc)
    app.last_document_received_date = func.now()
    await session.commit()
    await session.refresh(doc)
    logger.info(
        "Document %s (%s) registered on %s",
        doc.id,
        body.doc_type.value,
        app.application_reference_number,
    )
    return doc


async def upload_document(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    doc_type: DocumentType,
    filename: str,
    content_type: str,
    file_data: bytes,
) -> Document | None:
    """Upload bytes through the API and create the document record."""
    _check_content_type(content_type)

    max_bytes = settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024
    if len(file_data) > max_bytes:
        raise DocumentUploadError(
            f"File size {len(file_data)} exceeds maximum of {settings.UPLOAD_MAX_SIZE_MB}MB"
        )

    app = await get_application(session, user, application_id)
    if app is None:
        return None
    reference = app.application_reference_number

    storage = get_storage_service()
    object_key = storage.build_object_key(reference, doc_type.value, filename)
    await storage.upload_file(file_data, object_key, content_type)

    doc = Document(
        application_id=application_id,
        doc_type=doc_type,
        object_key=object_key,
        file_name=filename,
        content_type=content_type,
        uploaded_by=user.user_id,
    )
    session.add(doc)
    app.last_document_received_date = func.now()
    await session.commit()
    await session.refresh(doc)
    return doc


async def list_documents(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    *,
    doc_type: DocumentType | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Document], int]:
    """Return documents for an application visible to the current user."""
    count_stmt = select(func.count(Document.id)).where(Document.application_id == application_id)
    count_stmt = apply_data_scope(
        count_stmt, user.data_scope, user, join_to_application=Document.application
    )
    stmt = (
        select(Document)
        .where(Document.application_id == application_id)
        .order_by(Document.created_at.desc(), Document.id.desc())
        .offset(offset)
        .limit(limit)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user, join_to_application=Document.application)
    if doc_type is not None:
        count_stmt = count_stmt.where(Document.doc_type == doc_type)
        stmt = stmt.where(Document.doc_type == doc_type)

    total = (await session.execute(count_stmt)).scalar() or 0
    result = await session.execute(stmt)
    return result.unique().scalars().all(), total


async def get_document(
    session: AsyncSession,
    user: UserContext,
    document_id: int,
) -> Document | None:
    stmt = select(Document).where(Document.id == document_id)
    stmt = apply_data_scope(stmt, user.data_scope, user, join_to_application=Document.application)
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def get_download_url(
    session: AsyncSession,
    user: UserContext,
    document_id: int,
) -> tuple[Document, str] | None:
    doc = await get_document(session, user, document_id)
    if doc is None:
        return None
    url = await get_storage_service().get_download_url(
        doc.object_key, expires_in=settings.PRESIGNED_URL_TTL
    )
    return doc, url


async def analysis_documents(
    session: AsyncSession,
    reference: str,
) -> list[Document]:
    """Analysis documents of an application, found by reference number."""
    stmt = (
        select(Document)
        .join(Document.application)
        .where(
            LoanApplication.application_reference_number == reference,
            Document.doc_type.in_(sorted(DocumentType.analysis_documents())),
        )
        .order_by(Document.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
