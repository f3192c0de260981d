"""Centralized Jinja2 template configuration with timezone support."""
import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def get_app_tz() -> ZoneInfo:
    """Get the application timezone (APP_TIMEZONE, defaults to UTC)."""
    return ZoneInfo(os.getenv("APP_TIMEZONE", "UTC"))


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime. Use this instead of datetime.now()."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    return utc_now().astimezone(get_app_tz())


def local_today() -> date:
    """Calendar date a new summary is filed under."""
    return local_now().date()


def to_local(dt: datetime) -> datetime:
    """Convert a datetime to the app's local timezone for display.

    Naive datetimes are assumed to be UTC, which is how the models store them.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(get_app_tz())


def parse_timestamp(value) -> datetime:
    """Accept a datetime or the ISO string stored in a notes snapshot."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def localtime(dt, fmt: str = None) -> str:
    """Jinja filter to convert UTC datetime to local time string.

    Usage in templates:
        {{ note.created_at | localtime }}
        {{ note.created_at | localtime('%b %d, %H:%M') }}
    """
    dt = parse_timestamp(dt)
    if dt is None:
        return ""

    # Default format: "14:30"
    return to_local(dt).strftime(fmt or "%H:%M")


def localdate(value, fmt: str = None) -> str:
    """Jinja filter for calendar dates and datetimes.

    Usage in templates:
        {{ summary.date | localdate }}
        {{ summary.created_at | localdate('%B %d, %Y') }}
    """
    if value is None:
        return ""

    if isinstance(value, str):
        value = date.fromisoformat(value)
    if isinstance(value, datetime):
        value = to_local(value)

    # Default format: "Jan 15, 2025"
    return value.strftime(fmt or "%b %d, %Y")


def create_templates() -> Jinja2Templates:
    """Create a Jinja2Templates instance with custom filters."""
    templates = Jinja2Templates(directory=TEMPLATE_DIR)

    templates.env.filters["localtime"] = localtime
    templates.env.filters["localdate"] = localdate

    return templates


# Singleton template instance - import this in route files
templates = create_templates()
