"""
Summary Service

End-of-day flow and history queries for the summaries table. Everything
here is scoped to one user; ownership is checked before any read of a
single row or any delete.
"""

import os
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Note, Summary, User
from app.services.errors import (
    ForbiddenError,
    NoNotesError,
    NotFoundError,
    PersistenceError,
)
from app.services.note_events import broker
from app.services.note_service import list_notes
from app.services.prompt_builder import REGULAR
from app.services.summarizer import SummaryOrchestrator, SummaryResult
from app.template_config import local_now

logger = logging.getLogger(__name__)

KEEP_NOTES = "keep"
DELETE_NOTES = "delete"


def get_note_retention() -> str:
    """NOTE_RETENTION: 'keep' (default) leaves notes for the start-new-day action."""
    value = os.getenv("NOTE_RETENTION", KEEP_NOTES).strip().lower()
    return DELETE_NOTES if value == DELETE_NOTES else KEEP_NOTES


def create_day_summary(
    db: Session,
    user: User,
    orchestrator: SummaryOrchestrator,
    mode: str = REGULAR,
    now=None,
) -> Tuple[Summary, SummaryResult]:
    """
    Summarize the user's pending notes and store the result.

    Either a Summary row is committed and returned, or an exception is
    raised and nothing was written. Notes are only removed when
    NOTE_RETENTION=delete, and then in the same transaction as the insert.

    The read transaction is ended before the providers are called, so no
    pooled connection is held during the (possibly two) HTTP round trips.

    Raises:
        NoNotesError: the user has no pending notes.
        AllProvidersFailedError: no provider produced a summary.
        PersistenceError: the summary could not be committed.
    """
    now = now or local_now()
    user_id = user.id

    snapshot = [note.to_snapshot() for note in list_notes(db, user)]
    db.rollback()
    if not snapshot:
        raise NoNotesError("No notes to summarize")

    result = orchestrator.summarize(snapshot, mode, now)

    summary = Summary(
        user_id=user_id,
        content=result.text,
        note_count=len(snapshot),
        date=now.date(),
        summary_type=mode,
        provider=result.provider,
        notes_snapshot=snapshot,
    )

    delete_notes = get_note_retention() == DELETE_NOTES
    deleted_ids = [note["id"] for note in snapshot] if delete_notes else []

    try:
        db.add(summary)
        if delete_notes:
            # Only the summarized notes; anything written meanwhile stays
            db.query(Note).filter(
                Note.user_id == user_id, Note.id.in_(deleted_ids)
            ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to save summary for user %s: %s", user_id, e)
        raise PersistenceError("Failed to save summary") from e

    db.refresh(summary)
    if deleted_ids:
        broker.publish_deleted(user_id, deleted_ids)

    logger.info(
        "Saved %s summary %s for user %s (%d notes, provider=%s)",
        mode, summary.id, user_id, summary.note_count, result.provider,
    )
    return summary, result


def list_summaries(db: Session, user: User, on_date: Optional[date] = None) -> List[Summary]:
    """Newest first."""
    query = db.query(Summary).filter(Summary.user_id == user.id)
    if on_date is not None:
        query = query.filter(Summary.date == on_date)
    return query.order_by(Summary.created_at.desc(), Summary.id.desc()).all()


def get_owned_summary(db: Session, user: User, summary_id: int) -> Summary:
    summary = db.query(Summary).filter(Summary.id == summary_id).first()
    if summary is None:
        raise NotFoundError("Summary not found")
    if not user.owns(summary):
        raise ForbiddenError("Forbidden: You can only access your own summaries")
    return summary


def delete_summary(db: Session, user: User, summary_id: int):
    summary = db.query(Summary).filter(Summary.id == summary_id).first()
    if summary is None:
        raise NotFoundError("Summary not found")
    if not user.owns(summary):
        logger.warning("User %s tried to delete summary %s owned by another user", user.id, summary_id)
        raise ForbiddenError("Forbidden: You can only delete your own summaries")

    try:
        db.delete(summary)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to delete summary %s: %s", summary_id, e)
        raise PersistenceError("Failed to delete summary") from e
