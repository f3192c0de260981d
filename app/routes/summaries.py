"""
Summary History Routes

JSON endpoints behind the history sidebar: list, read and delete the
caller's past summaries.
"""

from datetime import date as date_type, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import require_user
from app.database import get_db
from app.models import User
from app.services import summary_service

router = APIRouter(prefix="/summaries", tags=["summaries"])


def parse_date(value: str) -> date_type:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date, expected YYYY-MM-DD")


@router.get("")
async def list_summaries(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """All of the caller's summaries, newest first."""
    summaries = summary_service.list_summaries(db, user)
    return {
        "success": True,
        "summaries": [s.to_dict() for s in summaries],
        "count": len(summaries),
    }


@router.get("/date/{day}")
async def summaries_for_date(
    day: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    on_date = parse_date(day)
    summaries = summary_service.list_summaries(db, user, on_date=on_date)
    return {
        "success": True,
        "date": on_date.isoformat(),
        "summaries": [s.to_dict() for s in summaries],
        "count": len(summaries),
    }


@router.get("/{summary_id}")
async def get_summary(
    summary_id: int,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    summary = summary_service.get_owned_summary(db, user, summary_id)
    return {"success": True, "summary": summary.to_dict()}


@router.delete("/{summary_id}")
async def delete_summary(
    summary_id: int,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's summaries (403 if it belongs to someone else)."""
    summary_service.delete_summary(db, user, summary_id)
    return {"success": True, "message": "Summary deleted successfully"}
