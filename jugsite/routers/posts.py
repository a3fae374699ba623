from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from jugsite.config import SiteSettings, get_settings
from jugsite.database.dynamodb import get_db_connection
from jugsite.routers.web import redirect, render_view, request_locale
from jugsite.schemas.post import Post, PostCreate, PostStatus
from jugsite.services.feed_service import RSS_CONTENT_TYPE, NewsFeedRenderer
from jugsite.services.post_service import (
    PostExistsError,
    PostRenderingService,
    PostService,
    resolve_published_on,
)

router = APIRouter(tags=["posts"])


def get_post_service(settings: SiteSettings = Depends(get_settings)):
    """Dependency to get PostService instance"""
    db = get_db_connection(settings)
    return PostService(db, settings.table_name)


def get_post_rendering_service():
    return PostRenderingService()


@router.post("/posts/", response_model=Post, status_code=201)
async def create_post(
    post_data: PostCreate, post_service: PostService = Depends(get_post_service)
):
    """Create a new post"""
    try:
        return post_service.create_post(post_data)
    except PostExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/feed.rss")
async def feed(
    request: Request,
    page: int = Query(0, ge=0, description="Zero based page index"),
    post_service: PostService = Depends(get_post_service),
    rendering_service: PostRenderingService = Depends(get_post_rendering_service),
    settings: SiteSettings = Depends(get_settings),
):
    """Published posts as a paginated RSS feed"""
    posts = post_service.get_published_page(page, settings.page_size)
    locale = request_locale(request, settings.default_locale)
    body = NewsFeedRenderer(settings, rendering_service.render).render(posts, locale)
    return Response(content=body, media_type=RSS_CONTENT_TYPE)


@router.get("/archive")
async def archive(post_service: PostService = Depends(get_post_service)):
    return render_view("archive", {"posts": post_service.find_all_published()})


@router.get("/{year}/{month}/{day}/{slug}")
async def show_post(
    year: str,
    month: str,
    day: str,
    slug: str,
    post_service: PostService = Depends(get_post_service),
):
    """A single post with links to its neighbours"""
    published_on = resolve_published_on(year, month, day)
    if published_on is None:
        return redirect("/")

    post = post_service.get_post(published_on, slug)
    if post is None or post.status != PostStatus.published:
        return redirect("/")

    return render_view(
        "post",
        {
            "post": post,
            "previousPost": post_service.get_previous(post),
            "nextPost": post_service.get_next(post),
        },
    )
