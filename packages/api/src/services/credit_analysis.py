# This project was developed with assistance from AI tools.
"""Hand-off of analysis documents to the external credit analysis service.

The payload lists the application's analysis documents with short-lived
download URLs so the external service can fetch them without storage
credentials.
"""

import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..schemas.auth import UserContext
from ..schemas.credit_analysis import CreditAnalysisResponse
from ..services.application import get_application
from ..services.document import analysis_documents
from ..services.storage import get_storage_service

logger = logging.getLogger(__name__)


class CreditAnalysisUnavailable(Exception):
    """Raised when no external credit analysis endpoint is configured."""


class CreditAnalysisFailed(Exception):
    """Raised when the external service errors or cannot be reached."""


class NoAnalysisDocuments(ValueError):
    """Raised when the application has no analysis documents to send."""


async def forward_analysis_documents(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> CreditAnalysisResponse | None:
    """POST the application's analysis documents to the external service.

    Returns None if the application is not visible to the caller.
    """
    if not settings.CREDIT_ANALYSIS_URL:
        raise CreditAnalysisUnavailable("Credit analysis service is not configured")

    app = await get_application(session, user, application_id)
    if app is None:
        return None
    reference = app.application_reference_number

    docs = await analysis_documents(session, reference)
    if not docs:
        raise NoAnalysisDocuments(f"Application {reference} has no analysis documents")

    storage = get_storage_service()
    payload = {
        "customer_id": app.customer_number,
        "application_reference_number": reference,
        "documents": [
            {
                "doc_type": doc.doc_type.value,
                "object_key": doc.object_key,
                "url": await storage.get_download_url(
                    doc.object_key, expires_in=settings.PRESIGNED_URL_TTL
                ),
            }
            for doc in docs
        ],
    }

    try:
        async with httpx.AsyncClient(timeout=settings.CREDIT_ANALYSIS_TIMEOUT) as client:
            response = await client.post(settings.CREDIT_ANALYSIS_URL, json=payload)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "Credit analysis rejected %s: HTTP %s", reference, exc.response.status_code
        )
        raise CreditAnalysisFailed(
            f"Credit analysis service returned {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("Credit analysis unreachable for %s: %s", reference, exc)
        raise CreditAnalysisFailed("Credit analysis service unreachable") from exc

    try:
        result = response.json()
    except ValueError:
        logger.debug("Credit analysis response for %s is not JSON", reference)
        result = None
    if result is not None and not isinstance(result, dict):
        result = {"data": result}
    logger.info("Forwarded %d analysis documents for %s", len(docs), reference)
    return CreditAnalysisResponse(
        application_reference_number=reference,
        forwarded_documents=len(docs),
        upstream_status=response.status_code,
        result=result,
    )
