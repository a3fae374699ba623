from typing import Iterable, List, Optional

from jugsite.config import SiteSettings
from jugsite.schemas.event import Event
from jugsite.services.formatting import format_ics_datetime

ICS_LINEBREAK = "\r\n"
ICS_CONTENT_TYPE = "text/calendar"


def format_location(location: Optional[str]) -> str:
    """Collapse a multi-line location into one line.

    Blank lines are dropped and the rest joined with ", ". Leading
    whitespace of the first kept line is preserved as is.
    """
    if not location:
        return ""
    lines = [line for line in location.splitlines() if line.strip()]
    return ", ".join(lines)


class CalendarFeedRenderer:
    """Renders upcoming events as an iCalendar document.

    Lines are not folded at 75 octets.
    """

    def __init__(self, settings: SiteSettings):
        self.settings = settings

    def render(self, events: Iterable[Event]) -> str:
        """Render events, which must already be sorted by start ascending"""
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{self.settings.calendar_prodid}",
        ]
        for event in events:
            lines.extend(self._event_lines(event))
        lines.append("END:VCALENDAR")

        return "".join(line + ICS_LINEBREAK for line in lines)

    def _event_lines(self, event: Event) -> List[str]:
        pattern = self.settings.ics_datetime_format

        summary = event.title
        if event.speaker:
            summary += f" ({event.speaker})"

        lines = [
            "BEGIN:VEVENT",
            f"UID:{event.id}@{self.settings.domain}",
            f"ORGANIZER:{self.settings.organizer}",
            f"DTSTAMP:{format_ics_datetime(event.createdAt, pattern)}",
            f"DTSTART:{format_ics_datetime(event.heldOn, pattern)}",
            f"DTEND:{format_ics_datetime(event.endsAt, pattern)}",
            f"SUMMARY:{summary}",
            f"DESCRIPTION:{event.description}",
            f"URL:{self.settings.base_url}/register/{event.id}",
        ]

        location = format_location(event.location)
        if location:
            # Value starts after a blank unless it brings its own leading whitespace
            separator = "" if location[0].isspace() else " "
            lines.append(f"LOCATION:{separator}{location}")

        lines.append("END:VEVENT")
        return lines
