"""
Summary Model

Stores the AI-generated recap of one day's notes. Rows are immutable once
written; the only mutation is deletion by the owner.

Several summaries may exist for the same user and date: every end-of-day
action inserts a new row.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, Date, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from app.database import Base


class Summary(Base):
    __tablename__ = "summaries"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    note_count = Column(Integer, nullable=False, default=0)
    date = Column(Date, nullable=False, index=True)
    summary_type = Column(String(20), nullable=False, default="regular")  # regular, counselling
    provider = Column(String(20), nullable=True)  # primary, secondary
    notes_snapshot = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="summaries")

    __table_args__ = (
        Index("ix_summaries_user_date", "user_id", "date"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "content": self.content,
            "note_count": self.note_count,
            "date": self.date.isoformat() if self.date else None,
            "summary_type": self.summary_type,
            "provider": self.provider,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "notes_snapshot": self.notes_snapshot or [],
        }

    def __repr__(self):
        return f"<Summary {self.date} user:{self.user_id}>"
