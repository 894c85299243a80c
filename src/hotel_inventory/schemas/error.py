"""Error response schemas.

All error responses use the same envelope: {"error": {"code": "...", "message": "..."}}.
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
