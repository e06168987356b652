from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config_manager import config
from core.exceptions import FocusMateAPIError, FocusMateConfigError
from core.focusmate_client import FocusMateClient

router = APIRouter()


def get_focusmate_client() -> FocusMateClient:
    return FocusMateClient()


@router.get("/focusmate")
def get_sessions(start: Optional[str] = None, end: Optional[str] = None):
    """Proxy FocusMate sessions for [start, end]."""
    client = get_focusmate_client()
    if not client.api_key:
        missing = FocusMateConfigError()
        return JSONResponse(status_code=missing.status_code, content={"error": missing.message})

    if not start or not end:
        return JSONResponse(status_code=400, content={"error": "Missing start or end date parameters"})

    try:
        data = client.fetch_sessions(start, end)
    except FocusMateAPIError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message, "details": e.details},
        )

    return JSONResponse(
        content=data,
        headers={"Cache-Control": f"public, max-age={config.FOCUSMATE_CACHE_SECONDS}"},
    )
