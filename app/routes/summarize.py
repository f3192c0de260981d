"""
End-of-day Summarization Route

POST /summarize turns the caller's pending notes into a stored Summary.
"""

import logging

from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.auth import require_user
from app.database import get_db
from app.models import User
from app.services.prompt_builder import COUNSELLING, parse_mode
from app.services.summarizer import SummaryOrchestrator, get_orchestrator
from app.services.summary_service import create_day_summary

logger = logging.getLogger(__name__)

router = APIRouter(tags=["summarize"])

PROVIDER_LABELS = {
    "qwen": "Alibaba Qwen",
    "doubao": "Doubao",
}


async def read_summary_type(request: Request) -> str:
    """Mode from the JSON body; a missing or unreadable body means regular."""
    try:
        payload = await request.json()
    except ValueError:
        return parse_mode(None)
    if not isinstance(payload, dict):
        return parse_mode(None)
    return parse_mode(payload.get("summaryType"))


@router.post("/summarize")
async def summarize_day(
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    orchestrator: SummaryOrchestrator = Depends(get_orchestrator),
):
    """Generate, store and return today's summary."""
    mode = await read_summary_type(request)

    # Provider calls block for up to two HTTP round trips
    summary, result = await run_in_threadpool(
        create_day_summary, db, user, orchestrator, mode
    )

    label = PROVIDER_LABELS.get(result.provider_name, result.provider_name)
    kind = "Counselling" if mode == COUNSELLING else "Summary"

    return {
        "success": True,
        "summary": summary.to_dict(),
        "provider": result.provider,
        "provider_name": result.provider_name,
        "message": f"{kind} generated! Used {label}",
    }
