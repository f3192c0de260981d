"""
Prompt Builder

Turns a day's notes into the single user message sent to an LLM provider.
The same prompt is sent to every provider in the fallback chain, so nothing
in here is vendor specific.

The function is pure: the current date is passed in as ``now`` and only
used for the weekday/date framing line.
"""

from datetime import datetime
from typing import Iterable, Optional

from app.template_config import localtime, parse_timestamp

REGULAR = "regular"
COUNSELLING = "counselling"
SUMMARY_TYPES = (REGULAR, COUNSELLING)


def parse_mode(value) -> str:
    """Map a request's ``summaryType`` to a mode; anything unknown is regular."""
    if isinstance(value, str) and value.strip().lower() in SUMMARY_TYPES:
        return value.strip().lower()
    return REGULAR


def _field(note, name):
    if isinstance(note, dict):
        return note.get(name)
    return getattr(note, name, None)


def format_notes(notes: Iterable) -> str:
    """Render notes as ``"<n>. [<HH:MM>] <content>"`` lines, in input order."""
    lines = []
    for index, note in enumerate(notes, start=1):
        created_at = parse_timestamp(_field(note, "created_at"))
        content = " ".join(str(_field(note, "content") or "").split())
        lines.append(f"{index}. [{localtime(created_at)}] {content}")
    return "\n".join(lines)


REGULAR_TEMPLATE = """Here are the notes I wrote throughout {day_label}:

{notes}

Please write a short summary of my day in 3-5 sentences (no more than 200 words).
Cover what I did and how I seemed to feel, staying factual and close to what the notes say.
Write in the second person ("you") and do not use headings or bullet points."""

COUNSELLING_TEMPLATE = """Here are the notes I wrote throughout {day_label}:

{notes}

Act as a warm, thoughtful life counsellor reviewing my day. Write a reflection of 150-250 words with these parts:

1. Work efficiency: what went well and where time or energy was lost.
2. Balance: how work, rest, relationships and personal time were spread across the day.
3. Emotional health: the feelings that show up in the notes, acknowledged without judgement.
4. Tomorrow: two or three concrete, small actions for the next day.
5. Long term: one gentle observation worth keeping in mind over the coming weeks.

Be encouraging and specific to the notes. Speak directly to me ("you")."""

GENERIC_TEMPLATE = """Here are my notes from {day_label}:

{notes}

Please summarize them briefly."""

TEMPLATES = {
    REGULAR: REGULAR_TEMPLATE,
    COUNSELLING: COUNSELLING_TEMPLATE,
}


def build_prompt(notes, mode: str = REGULAR, now: Optional[datetime] = None) -> str:
    """
    Build the summarization prompt.

    Args:
        notes: Notes (ORM rows or dicts with ``content``/``created_at``),
            already sorted ascending by creation time.
        mode: ``"regular"`` or ``"counselling"``. Any other value gets a
            minimal generic template.
        now: Local datetime of the request, used for the day framing.
            Without it the prompt just says "today".

    Returns:
        The completed prompt text.
    """
    if now is not None:
        day_label = f"today, {now.strftime('%A, %B')} {now.day}, {now.year}"
    else:
        day_label = "today"

    template = TEMPLATES.get(mode, GENERIC_TEMPLATE)
    return template.format(day_label=day_label, notes=format_notes(notes))
