from fastapi import APIRouter, Depends, HTTPException

from jugsite.config import SiteSettings, get_settings
from jugsite.database.dynamodb import get_db_connection
from jugsite.schemas.link import Link, LinkCreate
from jugsite.services.link_service import LinkService

router = APIRouter(prefix="/links", tags=["links"])


def get_link_service(settings: SiteSettings = Depends(get_settings)):
    """Dependency to get LinkService instance"""
    db = get_db_connection(settings)
    return LinkService(db, settings.table_name)


@router.post("/", response_model=Link, status_code=201)
async def create_link(
    link_data: LinkCreate, link_service: LinkService = Depends(get_link_service)
):
    try:
        return link_service.create_link(link_data)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
