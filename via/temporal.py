"""
Date and time normalization for plan requests.

Users type partial dates ("5", "5/12", "5/12/2024") and loose times
("9", "14:30"). Missing pieces come from a fallback instant. Values are
not validated here; the remote planner is the final arbiter.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

_CLOCK_PREFIX = re.compile(r"^\d{2}:\d{2}", re.ASCII)
_PLAN_TIME = re.compile(r"^(\d{1,2}):(\d{2})", re.ASCII)
_HOUR = re.compile(r"[+-]?[0-9]+")

SOON_WINDOW = timedelta(minutes=30)


def normalize_date(token: str, fallback: datetime) -> str:
    """Turn "D[/M[/Y]]" into "Y-M-D", filling month and year from fallback."""
    parts = token.split("/")
    day = parts[0]
    month = parts[1] if len(parts) > 1 else fallback.strftime("%m")
    year = parts[2] if len(parts) > 2 else fallback.strftime("%Y")
    return f"{year}-{month}-{day}"


def normalize_time(token: str, fallback: datetime) -> str:
    """
    Turn a time token into "HH:MM".

    Tokens starting with "HH:MM" pass through untouched, trailing text
    included. A bare integer is read as an hour. Anything else silently
    becomes the fallback time.
    """
    if _CLOCK_PREFIX.match(token):
        return token

    if not _HOUR.fullmatch(token):
        logger.debug("Unreadable time token, using fallback", extra={"token": token})
        return fallback.strftime("%H:%M")

    if int(token) < 10:
        token = "0" + token
    return token + ":00"


def parse_plan_instant(date: str, time: str) -> Optional[datetime]:
    """
    Build the local instant for normalized date and time strings.

    Returns None when the strings do not describe a real instant.
    """
    match = _PLAN_TIME.match(time)
    if match is None:
        return None

    try:
        year, month, day = (int(p) for p in date.split("-"))
        return datetime(year, month, day, int(match.group(1)), int(match.group(2)))
    except ValueError:
        return None


def _describe_day(instant: datetime, now: datetime) -> str:
    today = now.date()
    day = instant.date()

    if day == today:
        return "hoje"
    if day == today + timedelta(days=1):
        return "amanhã"
    if instant.year == now.year and instant.month == now.month:
        return "dia " + instant.strftime("%d")
    if instant.year == now.year:
        return "dia " + instant.strftime("%d/%m")
    return "dia " + instant.strftime("%d/%m/%y")


def _describe_clock(instant: datetime, now: datetime) -> str:
    if now <= instant < now + SOON_WINDOW:
        minutes = int((instant - now).total_seconds() // 60)
        if minutes == 0:
            return "agora"
        if minutes == 1:
            return "em 1 minuto"
        return f"em {minutes} minutos"
    return "as " + instant.strftime("%H:%M") + " horas"


def describe_relative(instant: datetime, now: datetime) -> str:
    """
    Describe an instant relative to now, in Portuguese.

    Both datetimes are naive local times.

    >>> now = datetime(2024, 3, 10, 8, 0)
    >>> describe_relative(datetime(2024, 3, 10, 8, 10), now)
    'hoje em 10 minutos'
    >>> describe_relative(datetime(2024, 3, 11, 7, 5), now)
    'amanhã as 07:05 horas'
    """
    return f"{_describe_day(instant, now)} {_describe_clock(instant, now)}"
