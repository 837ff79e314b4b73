# studio_pos/utils/clock.py
from datetime import date, datetime
from zoneinfo import ZoneInfo

from studio_pos.utils.settings import STUDIO_TIMEZONE

STUDIO_TZ = ZoneInfo(STUDIO_TIMEZONE)


def now() -> datetime:
    """Current time in the studio timezone."""
    return datetime.now(STUDIO_TZ)


def today() -> date:
    # "today" is the studio's calendar day, not the server's
    return now().date()
