from datetime import date

import pytest

from jugsite.schemas.post import PostCreate, PostStatus
from jugsite.services.post_service import (
    PostExistsError,
    PostRenderingService,
    PostService,
    resolve_published_on,
)
from tests.conftest import TEST_TABLE_NAME


@pytest.fixture
def post_service(dynamodb_resource):
    """Create PostService instance with test table"""
    return PostService(dynamodb_resource, TEST_TABLE_NAME)


def publish(post_service, published_on, slug, status=PostStatus.published):
    return post_service.create_post(
        PostCreate(
            publishedOn=published_on,
            slug=slug,
            title=slug.title(),
            content=f"Content of {slug}",
            status=status,
        )
    )


@pytest.fixture
def timeline(post_service):
    """Three published posts and one draft, created oldest first"""
    return [
        publish(post_service, date(2016, 8, 4), "bar"),
        publish(post_service, date(2016, 8, 5), "foo"),
        publish(post_service, date(2016, 8, 5), "baz"),
        publish(post_service, date(2016, 8, 6), "draft", PostStatus.draft),
    ]


def test_get_post(post_service, timeline):
    post = post_service.get_post(date(2016, 8, 5), "foo")

    assert post == timeline[1]


def test_get_missing_post(post_service, timeline):
    assert post_service.get_post(date(2016, 8, 5), "nope") is None
    assert post_service.get_post(date(2016, 8, 4), "foo") is None


def test_same_slug_and_date_is_rejected(post_service, timeline):
    with pytest.raises(PostExistsError):
        publish(post_service, date(2016, 8, 4), "bar")


def test_same_slug_on_another_day_is_fine(post_service, timeline):
    publish(post_service, date(2016, 8, 7), "bar")

    assert post_service.get_post(date(2016, 8, 7), "bar") is not None


def test_published_page_order_and_count(post_service, timeline):
    page = post_service.get_published_page(0, 5)

    # Newest publication date first, then newest creation first
    assert [post.slug for post in page.items] == ["baz", "foo", "bar"]
    assert page.totalCount == 3
    assert page.pageIndex == 0
    assert not page.hasNext


def test_published_page_slices(post_service, timeline):
    first = post_service.get_published_page(0, 2)
    second = post_service.get_published_page(1, 2)

    assert [post.slug for post in first.items] == ["baz", "foo"]
    assert first.hasNext
    assert [post.slug for post in second.items] == ["bar"]
    assert second.hasPrevious
    assert not second.hasNext


def test_page_beyond_last_page_is_empty(post_service, timeline):
    page = post_service.get_published_page(5, 2)

    assert page.items == []
    assert page.totalCount == 3


def test_archive_contains_published_posts_only(post_service, timeline):
    assert [post.slug for post in post_service.find_all_published()] == ["baz", "foo", "bar"]


def test_previous_and_next(post_service, timeline):
    foo = timeline[1]

    assert post_service.get_previous(foo).slug == "bar"
    assert post_service.get_next(foo).slug == "baz"
    assert post_service.get_previous(timeline[0]) is None
    assert post_service.get_next(timeline[2]) is None


@pytest.mark.parametrize(
    "segments",
    [
        (2016, 2, 30),
        (2017, 1, 32),
        (2017, 13, 1),
        ("2017", "x", "1"),
        (0, 1, 1),
        ("2017", "1", "99999999999999999999"),
    ],
)
def test_resolve_published_on_rejects_invalid_dates(segments):
    assert resolve_published_on(*segments) is None


def test_resolve_published_on():
    assert resolve_published_on("2016", "2", "29") == date(2016, 2, 29)


def test_rendering_keeps_line_breaks(reference_posts):
    post = reference_posts[0].model_copy(update={"content": "line one\nline two"})

    assert PostRenderingService().render(post) == "<p>line one<br/>line two</p>"
