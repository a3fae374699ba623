from fastapi import APIRouter, Depends, Query

from jugsite.config import SiteSettings, get_settings
from jugsite.routers.events import get_event_service
from jugsite.routers.links import get_link_service
from jugsite.routers.posts import get_post_service
from jugsite.routers.web import render_view
from jugsite.services.event_service import EventService
from jugsite.services.link_service import LinkService
from jugsite.services.post_service import PostService

router = APIRouter(tags=["index"])


@router.get("/")
async def index(
    page: int = Query(0, ge=0),
    event_service: EventService = Depends(get_event_service),
    post_service: PostService = Depends(get_post_service),
    link_service: LinkService = Depends(get_link_service),
    settings: SiteSettings = Depends(get_settings),
):
    """Upcoming events, links grouped by type and the latest posts"""
    return render_view(
        "index",
        {
            "upcomingEvents": event_service.find_upcoming_events(),
            "links": link_service.find_grouped_by_type(),
            "posts": post_service.get_published_page(page, settings.page_size),
        },
    )
