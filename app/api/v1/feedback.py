from typing import Any

from fastapi import APIRouter, Body, Depends

from app.core.security import require_api_key
from app.normalize.feedback import sanitize_feedback, validate_feedback_structure
from app.schemas.resume import Feedback

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/feedback/sanitize", response_model=Feedback)
async def sanitize(payload: Any = Body(...)):
    return sanitize_feedback(payload)


@router.post("/feedback/validate")
async def validate(payload: Any = Body(...)):
    return {"valid": validate_feedback_structure(payload)}
