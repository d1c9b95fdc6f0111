# This project was developed with assistance from AI tools.
"""External credit analysis hand-off schemas."""

from pydantic import BaseModel


class CreditAnalysisResponse(BaseModel):
    application_reference_number: str
    forwarded_documents: int
    upstream_status: int
    result: dict | None = None
