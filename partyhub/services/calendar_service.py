"""iCalendar (.ics) export of a party."""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from partyhub.models.party import Party
from partyhub.services.invitation_service import parse_party_datetime

ICS_DATETIME = "%Y%m%dT%H%M%S"
ICS_DATE = "%Y%m%d"


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _fold(line: str) -> list[str]:
    """Fold content lines longer than 75 octets."""
    encoded = line.encode("utf-8")
    if len(encoded) <= 75:
        return [line]
    parts = []
    current = ""
    for char in line:
        if len((current + char).encode("utf-8")) > 75:
            parts.append(current)
            current = " "
        current += char
    parts.append(current)
    return parts


def _format(dt: datetime) -> str:
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).strftime(ICS_DATETIME) + "Z"
    return dt.strftime(ICS_DATETIME)


def _is_date_only(value: str) -> bool:
    value = value.strip()
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _event_times(party: Party) -> Optional[tuple[str, str]]:
    """DTSTART and DTEND properties. A bare date becomes an all-day event."""
    start = parse_party_datetime(party.date)
    if start is None:
        return None

    if _is_date_only(party.date):
        days = max(1, math.ceil(party.duration / 24))
        end_day = start.date() + timedelta(days=days)
        return (
            f"DTSTART;VALUE=DATE:{start.strftime(ICS_DATE)}",
            f"DTEND;VALUE=DATE:{end_day.strftime(ICS_DATE)}",
        )

    duration = party.duration if party.duration and party.duration > 0 else 1.0
    end = start + timedelta(hours=duration)
    return f"DTSTART:{_format(start)}", f"DTEND:{_format(end)}"


def generate_ics(party: Party, url: str, now: Optional[datetime] = None) -> Optional[str]:
    """Render the party as a single VEVENT. Returns None when it has no usable date."""
    times = _event_times(party)
    if times is None:
        return None
    dtstart, dtend = times
    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Party Hub//Invitation//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:{party.id}@partyhub",
        f"DTSTAMP:{stamp.strftime(ICS_DATETIME)}Z",
        dtstart,
        dtend,
        f"SUMMARY:{_escape(party.name)}",
    ]
    if party.location:
        lines.append(f"LOCATION:{_escape(party.location)}")
    lines.append(f"DESCRIPTION:{_escape('View your invitation at: ' + url)}")
    lines.append(f"URL:{url}")
    lines += ["END:VEVENT", "END:VCALENDAR"]

    folded = []
    for line in lines:
        folded.extend(_fold(line))
    return "\r\n".join(folded) + "\r\n"
