"""Response envelope shared by the HTTP layer."""

from __future__ import annotations

from fastapi.responses import JSONResponse


def failure(message: str, status_code: int) -> JSONResponse:
    """Build the tagged failure envelope ``{"success": false, "error": ...}``."""
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})
