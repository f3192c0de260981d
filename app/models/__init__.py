from app.models.user import User
from app.models.note import Note
from app.models.summary import Summary

__all__ = [
    "User",
    "Note",
    "Summary",
]
