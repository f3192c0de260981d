"""
Note Service

Create, list and clear the current day's notes. Every change is published
to the owner's live note feed after it is committed.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.models import Note, User
from app.services.note_events import broker
from app.services.validators import validate_note_content

logger = logging.getLogger(__name__)


def list_notes(db: Session, user: User) -> List[Note]:
    return (
        db.query(Note)
        .filter(Note.user_id == user.id)
        .order_by(Note.created_at.asc(), Note.id.asc())
        .all()
    )


def add_note(db: Session, user: User, content) -> Note:
    """Validate, store and broadcast a new note. Raises ValueError on blank content."""
    note = Note(user_id=user.id, content=validate_note_content(content))
    db.add(note)
    db.commit()
    db.refresh(note)

    broker.publish_inserted(note)
    return note


def clear_notes(db: Session, user: User) -> int:
    """Start a new day: delete all of the user's notes. Returns how many were removed."""
    note_ids = [row.id for row in db.query(Note.id).filter(Note.user_id == user.id).all()]
    if not note_ids:
        return 0

    db.query(Note).filter(Note.user_id == user.id).delete(synchronize_session=False)
    db.commit()

    broker.publish_deleted(user.id, note_ids)
    logger.info("Cleared %d notes for user %s", len(note_ids), user.id)
    return len(note_ids)
