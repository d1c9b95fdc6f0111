# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .admin import setup_admin
from .core.config import settings
from .routes import (
    admin,
    analysis,
    applications,
    credit_analysis,
    decisions,
    documents,
    health,
    profile,
    public,
    workflow,
)
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    from .services.storage import init_storage_service

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_storage_service(settings)
    if settings.AUTH_DISABLED:
        logger.warning("AUTH_DISABLED is set: every request runs as the dev admin user")
    if not settings.CREDIT_ANALYSIS_URL:
        logger.info("CREDIT_ANALYSIS_URL not set: credit analysis hand-off disabled")
    yield


app = FastAPI(
    title="Credit Workflow API",
    description="Loan application intake and credit approval workflow",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


def _problem(
    request: Request,
    status_code: int,
    detail: str,
    headers: dict | None = None,
    errors: list | None = None,
) -> JSONResponse:
    """RFC 7807 Problem Details body. The request id is echoed back in a header."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Error"
    body = ErrorResponse(
        type="about:blank",
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        request_id=request_id,
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
        headers={**(headers or {}), "X-Request-ID": request_id},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _problem(request, exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in exc.errors()
    ]
    return _problem(request, 422, str(exc.errors()), errors=errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _problem(request, 500, "An unexpected error occurred.")


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(public.router, prefix="/api/public", tags=["public"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(workflow.router, prefix="/api/applications", tags=["workflow"])
app.include_router(
    credit_analysis.router, prefix="/api/applications", tags=["credit-analysis"]
)
app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])
app.include_router(decisions.router, prefix="/api/decisions", tags=["decisions"])
app.include_router(documents.router, prefix="/api", tags=["documents"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

# Setup SQLAdmin dashboard at /admin
setup_admin(app)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "Credit Workflow API"}
