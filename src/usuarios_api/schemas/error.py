"""Error response schemas.

Every error response uses the same envelope:
{"timestamp": "...", "status": 400, "code": "...", "message": "...", "errors": {...}}.
The classifier in errors.py is the only place that builds it.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope returned by all error responses.

    ``errors`` maps a field name or parameter path to a localized message and
    is left out of the payload when there is nothing field-specific to say.
    """

    timestamp: str
    status: int
    code: str
    message: str
    errors: dict[str, str] | None = None
