import xml.etree.ElementTree as ET
from typing import Callable, Optional

from jugsite.config import SiteSettings
from jugsite.schemas.post import Post, PostPage
from jugsite.services.formatting import format_rfc822_date

RSS_CONTENT_TYPE = "application/rss+xml"

ATOM_NS = "http://www.w3.org/2005/Atom"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("content", CONTENT_NS)


def post_link(base_url: str, post: Post) -> str:
    """Public address of a post, e.g. http://euregjug.eu/2016/8/4/bar"""
    published_on = post.publishedOn
    return (
        f"{base_url}/{published_on.year}/{published_on.month}/"
        f"{published_on.day}/{post.slug}"
    )


class NewsFeedRenderer:
    """Renders one page of published posts as an RSS 2.0 document"""

    def __init__(self, settings: SiteSettings, render_content: Callable[[Post], str]):
        self.settings = settings
        self.render_content = render_content

    def feed_link(self, page_index: int) -> str:
        return f"{self.settings.base_url}/feed.rss?page={page_index}"

    def render(self, page: PostPage, locale: Optional[str] = None) -> bytes:
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")

        self._text(channel, "title", self.settings.feed_title)
        self._text(channel, "link", self.settings.base_url)
        self._text(channel, "description", self.settings.feed_description)
        if locale:
            self._text(channel, "language", locale)

        if page.items:
            published = format_rfc822_date(page.items[0].publishedOn)
            self._text(channel, "pubDate", published)
            self._text(channel, "lastBuildDate", published)

        self._text(channel, "generator", self.settings.feed_generator)

        if page.hasPrevious:
            self._atom_link(channel, "previous", page.pageIndex - 1)
        self._atom_link(channel, "self", page.pageIndex)
        if page.hasNext:
            self._atom_link(channel, "next", page.pageIndex + 1)

        for post in page.items:
            self._item(channel, post)

        return ET.tostring(rss, encoding="UTF-8", xml_declaration=True)

    def _item(self, channel: ET.Element, post: Post) -> None:
        link = post_link(self.settings.base_url, post)

        item = ET.SubElement(channel, "item")
        self._text(item, "title", post.title)
        self._text(item, "link", link)
        self._text(item, f"{{{CONTENT_NS}}}encoded", self.render_content(post))
        self._text(item, "pubDate", format_rfc822_date(post.publishedOn))
        self._text(item, "author", self.settings.feed_author)
        guid = self._text(item, "guid", link)
        guid.set("isPermaLink", "false")

    def _atom_link(self, channel: ET.Element, rel: str, page_index: int) -> None:
        ET.SubElement(
            channel,
            f"{{{ATOM_NS}}}link",
            {
                "rel": rel,
                "href": self.feed_link(page_index),
                "type": RSS_CONTENT_TYPE,
            },
        )

    @staticmethod
    def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
        element = ET.SubElement(parent, tag)
        element.text = text
        return element
