"""
Dashboard Pages

Server-rendered shell for the journal: today's notes with the end-of-day
actions, the history sidebar, and a read-only page per past date.
"""

from urllib.parse import quote

from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.routes.summaries import parse_date
from app.services import note_service, summary_service
from app.template_config import local_today, templates

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, db: Session = Depends(get_db)):
    """Today's notes plus the history sidebar."""
    user = get_current_user(request, db)
    if not user:
        return RedirectResponse(url="/login", status_code=303)

    return templates.TemplateResponse(request, "dashboard/index.html", {
        "user": user,
        "today": local_today(),
        "notes": note_service.list_notes(db, user),
        "summaries": summary_service.list_summaries(db, user),
    })


@router.get("/history/{day}", response_class=HTMLResponse)
async def history_day(day: str, request: Request, db: Session = Depends(get_db)):
    """Every summary written on one date."""
    user = get_current_user(request, db)
    if not user:
        next = quote(f"/history/{day}", safe="/")
        return RedirectResponse(url=f"/login?next={next}", status_code=303)

    selected_date = parse_date(day)
    return templates.TemplateResponse(request, "dashboard/history.html", {
        "user": user,
        "selected_date": selected_date,
        "summaries": summary_service.list_summaries(db, user, on_date=selected_date),
        "all_summaries": summary_service.list_summaries(db, user),
    })
