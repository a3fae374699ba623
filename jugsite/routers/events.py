
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from jugsite.config import SiteSettings, get_settings
from jugsite.database.dynamodb import get_db_connection
from jugsite.schemas.event import Event, EventCreate
from jugsite.services.calendar_service import ICS_CONTENT_TYPE, CalendarFeedRenderer
from jugsite.services.event_service import EventService


router = APIRouter(tags=["events"])


def get_event_service(settings: SiteSettings = Depends(get_settings)):
    """Dependency to get EventService instance"""
    db = get_db_connection(settings)
    return EventService(db, settings.table_name)


@router.post("/events/", response_model=Event, status_code=201)
async def create_event(
    event_data: EventCreate, event_service: EventService = Depends(get_event_service)
):
    """Create a new event"""
    try:
        return event_service.create_event(event_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/events.ics")
async def events_calendar(
    event_service: EventService = Depends(get_event_service),
    settings: SiteSettings = Depends(get_settings),
):
    """Upcoming events as an iCalendar document"""
    events = event_service.find_upcoming_events()
    body = CalendarFeedRenderer(settings).render(events)
    return Response(content=body.encode("utf-8"), media_type=ICS_CONTENT_TYPE)
