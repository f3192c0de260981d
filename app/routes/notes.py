"""
Note Routes

The current day's notes: list, add, clear ("start new day") and a
websocket change feed so other open tabs stay in sync.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Request, Depends, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.auth import get_websocket_user, require_user
from app.database import get_db
from app.models import User
from app.services import note_service
from app.services.note_events import SNAPSHOT, NoteFeed, broker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("")
async def list_notes(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Pending notes, oldest first."""
    notes = note_service.list_notes(db, user)
    return {
        "success": True,
        "notes": [n.to_dict() for n in notes],
        "count": len(notes),
    }


@router.post("")
async def create_note(
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    content = payload.get("content") if isinstance(payload, dict) else None

    try:
        note = note_service.add_note(db, user, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return JSONResponse({"success": True, "note": note.to_dict()}, status_code=201)


@router.delete("")
async def start_new_day(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Delete every pending note so a fresh day can begin."""
    deleted = note_service.clear_notes(db, user)
    return {"success": True, "deleted": deleted}


@router.websocket("/stream")
async def note_stream(
    websocket: WebSocket,
    user: Optional[User] = Depends(get_websocket_user),
    db: Session = Depends(get_db),
):
    """
    Live note feed for the caller.

    The first message is {"event": "snapshot", "notes": [...]}; after that
    {"event": "insert"|"delete", "note": {...}} for each change. The database
    session is closed before the socket is accepted, so an open feed holds
    no pooled connection.
    """
    if user is None:
        db.close()
        await websocket.close(code=1008)
        return

    user_id = user.id
    # Subscribe before loading so no change between the two is lost
    subscription = broker.subscribe(user_id)
    try:
        try:
            feed = NoteFeed(note.to_dict() for note in note_service.list_notes(db, user))
        finally:
            db.close()

        await websocket.accept()
        await websocket.send_json({"event": SNAPSHOT, "notes": feed.notes})

        async def forward():
            while not subscription.overflowed:
                message = await subscription.get()
                if feed.apply(message):
                    await websocket.send_json(message)
            # Fell behind; the client reconnects and gets a fresh snapshot
            await websocket.close(code=1013)

        async def wait_for_disconnect():
            try:
                while True:
                    await websocket.receive_text()
            except WebSocketDisconnect:
                pass

        tasks = [
            asyncio.ensure_future(forward()),
            asyncio.ensure_future(wait_for_disconnect()),
        ]
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            if not task.cancelled() and task.exception():
                logger.warning("Note stream for user %s closed: %r", user_id, task.exception())
    finally:
        broker.unsubscribe(subscription)
