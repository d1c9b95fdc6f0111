# This project was developed with assistance from AI tools.
"""Error body returned by every failing endpoint (RFC 7807 Problem Details)."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Problem Details body. See https://datatracker.ietf.org/doc/html/rfc7807"""

    type: str = Field(default="about:blank", description="URI identifying the problem type.")
    title: str = Field(description="HTTP reason phrase for the status.")
    status: int = Field(description="HTTP status code.")
    detail: str = Field(
        default="",
        description="What went wrong. For 409 conflicts it names the status found.",
    )
    instance: str = Field(default="", description="Path of the request that failed.")
    request_id: str = Field(
        default="",
        description="Correlation ID, echoed in the X-Request-ID response header.",
    )
    errors: list[dict[str, Any]] | None = Field(
        default=None,
        description="Field-level validation errors (422 only).",
    )
