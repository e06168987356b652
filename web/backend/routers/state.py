from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from core.exceptions import ConfigError, MalformedInputError, StoreWriteError
from core.logger import get_logger
from core.models import build_default_state
from core.state_service import StateService
from core.stores.base import parse_snapshot_json

router = APIRouter()
logger = get_logger("api.state")


class StateUpdateRequest(BaseModel):
    allWeeksData: Optional[Dict[str, Any]] = None
    allWeeklyGoals: Optional[Dict[str, Any]] = None
    sessions: Optional[List[Any]] = None


def get_state_service() -> StateService:
    return StateService()


def _parse_update(raw_body: bytes) -> Dict[str, Any]:
    try:
        data = parse_snapshot_json(raw_body or b"null")
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Invalid JSON body: {e}")
    if not isinstance(data, dict):
        raise MalformedInputError("Body must be a JSON object")
    try:
        req = StateUpdateRequest(**data)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid state payload: {e.error_count()} field error(s)")
    return {
        "allWeeksData": req.allWeeksData or {},
        "allWeeklyGoals": req.allWeeklyGoals or {},
        "sessions": req.sessions or [],
    }


@router.get("/state")
def get_state():
    """Full snapshot with banking recalculated. Always 200."""
    logger.info("GET /state")
    try:
        service = get_state_service()
    except ConfigError as e:
        logger.error("Store misconfigured, serving default state: %s", e.message)
        return build_default_state().to_dict()
    return service.get_state()


@router.post("/state")
async def save_state(request: Request):
    """
    保存完整状态：
    1. 解析请求体 (非法 JSON -> 400)
    2. 重新计算 banking
    3. 整体写入存储 (失败 -> 500，不重试)
    """
    logger.info("POST /state")
    try:
        payload = _parse_update(await request.body())
    except MalformedInputError as e:
        logger.warning("Rejected state update: %s", e.message)
        raise HTTPException(status_code=400, detail=e.message)

    try:
        service = get_state_service()
        state = await run_in_threadpool(service.save_state, payload)
    except (StoreWriteError, ConfigError) as e:
        logger.error("State save failed: %s", e.message)
        raise HTTPException(status_code=500, detail=e.message)

    return {"success": True, "state": state}


@router.options("/state")
def state_preflight():
    return Response(status_code=200)
