import xml.etree.ElementTree as ET
from datetime import date

import pytest

from jugsite.schemas.post import Post, PostPage
from jugsite.services.feed_service import ATOM_NS, CONTENT_NS, NewsFeedRenderer, post_link
from jugsite.services.post_service import PostRenderingService


@pytest.fixture
def renderer(settings):
    return NewsFeedRenderer(settings, PostRenderingService().render)


def parse_channel(document: bytes) -> ET.Element:
    return ET.fromstring(document).find("channel")


def atom_links(channel: ET.Element) -> dict:
    return {
        link.get("rel"): link.get("href")
        for link in channel.findall(f"{{{ATOM_NS}}}link")
    }


def test_render_second_page(renderer, reference_posts):
    page = PostPage(items=reference_posts, pageIndex=1, pageSize=5, totalCount=15)
    channel = parse_channel(renderer.render(page, "en"))

    assert channel.findtext("title") == "EuregJUG Maas-Rhine - All things JVM!"
    assert channel.findtext("link") == "http://euregjug.eu"
    assert channel.findtext("description") == (
        "RSS Feed from EuregJUG, the Java User Group for the Euregio "
        "Maas-Rhine (Aachen, Maastricht, Liege)."
    )
    assert channel.findtext("pubDate") == "Fri, 05 Aug 2016 00:00:00 GMT"
    assert channel.findtext("lastBuildDate") == "Fri, 05 Aug 2016 00:00:00 GMT"
    assert channel.findtext("generator") == "https://github.com/EuregJUG-Maas-Rhine/site"
    assert channel.findtext("language") == "en"

    assert atom_links(channel) == {
        "previous": "http://euregjug.eu/feed.rss?page=0",
        "self": "http://euregjug.eu/feed.rss?page=1",
        "next": "http://euregjug.eu/feed.rss?page=2",
    }

    items = channel.findall("item")
    assert len(items) == 2
    bar = items[1]
    assert bar.findtext("title") == "bar"
    assert bar.findtext("link") == "http://euregjug.eu/2016/8/4/bar"
    assert "bar" in bar.findtext(f"{{{CONTENT_NS}}}encoded")
    assert bar.findtext("pubDate") == "Thu, 04 Aug 2016 00:00:00 GMT"
    assert bar.findtext("author") == "euregjug.eu"
    assert bar.findtext("guid") == "http://euregjug.eu/2016/8/4/bar"
    assert bar.find("guid").get("isPermaLink") == "false"


def test_last_page_has_no_next_link(renderer, reference_posts):
    page = PostPage(items=reference_posts, pageIndex=2, pageSize=5, totalCount=15)
    links = atom_links(parse_channel(renderer.render(page)))

    assert links == {
        "previous": "http://euregjug.eu/feed.rss?page=1",
        "self": "http://euregjug.eu/feed.rss?page=2",
    }


def test_first_page_has_no_previous_link(renderer, reference_posts):
    page = PostPage(items=reference_posts, pageIndex=0, pageSize=5, totalCount=15)
    links = atom_links(parse_channel(renderer.render(page)))

    assert set(links) == {"self", "next"}


def test_page_beyond_last_page(renderer):
    page = PostPage(items=[], pageIndex=7, pageSize=5, totalCount=15)
    channel = parse_channel(renderer.render(page))

    assert channel.findall("item") == []
    assert channel.find("pubDate") is None
    assert atom_links(channel) == {
        "previous": "http://euregjug.eu/feed.rss?page=6",
        "self": "http://euregjug.eu/feed.rss?page=7",
    }


def test_links_do_not_depend_on_locale(renderer, reference_posts):
    page = PostPage(items=reference_posts, pageIndex=1, pageSize=5, totalCount=15)
    english = parse_channel(renderer.render(page, "en"))
    german = parse_channel(renderer.render(page, "de"))

    assert atom_links(english) == atom_links(german)
    assert english.findtext("pubDate") == german.findtext("pubDate")


def test_content_is_escaped(settings):
    post = Post.create(
        publishedOn=date(2017, 1, 1),
        slug="markup",
        title="Fish & Chips",
        content="<b>bold</b>\n\nsecond",
    )
    page = PostPage(items=[post], pageIndex=0, pageSize=5, totalCount=1)
    document = NewsFeedRenderer(settings, PostRenderingService().render).render(page)
    item = parse_channel(document).find("item")

    assert item.findtext("title") == "Fish & Chips"
    assert item.findtext(f"{{{CONTENT_NS}}}encoded") == (
        "<p>&lt;b&gt;bold&lt;/b&gt;</p>\n<p>second</p>"
    )


def test_post_link_is_unpadded(reference_posts):
    assert post_link("http://euregjug.eu", reference_posts[0]) == (
        "http://euregjug.eu/2016/8/5/foo"
    )
