import html
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from jugsite.schemas.post import Post, PostCreate, PostPage, PostStatus

logger = logging.getLogger(__name__)

TIMELINE_PK = "POST_TIMELINE"


class PostExistsError(Exception):
    """A post with the same publication date and slug is already stored"""


def post_key(published_on: date, slug: str) -> Dict[str, str]:
    return {"PK": f"POST#{published_on.isoformat()}", "SK": f"SLUG#{slug}"}


def timeline_key(post: Post) -> str:
    """Sort key of published posts: publication date, then creation time"""
    created_at = post.createdAt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return f"DATE#{post.publishedOn.isoformat()}#CREATED#{created_at}#SLUG#{post.slug}"


def resolve_published_on(year: Any, month: Any, day: Any) -> Optional[date]:
    """Turn path segments into a date, or None when they don't form a real day"""
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError, OverflowError):
        return None


class PostRenderingService:
    """Renders post content to HTML: paragraphs separated by blank lines"""

    def render(self, post: Post) -> str:
        paragraphs = []
        for block in post.content.replace("\r\n", "\n").split("\n\n"):
            block = block.strip()
            if block:
                paragraphs.append("<p>" + html.escape(block).replace("\n", "<br/>") + "</p>")
        return "\n".join(paragraphs)

    __call__ = render


class PostService:
    def __init__(self, dynamodb_resource, table_name="CommunityApp"):
        self.dynamodb = dynamodb_resource
        self.table = dynamodb_resource.Table(table_name)

    def create_post(self, post_data: PostCreate) -> Post:
        post = Post.create(
            publishedOn=post_data.publishedOn,
            slug=post_data.slug,
            title=post_data.title,
            content=post_data.content,
            status=post_data.status,
        )

        item = {
            **post_key(post.publishedOn, post.slug),
            "publishedOn": post.publishedOn.isoformat(),
            "slug": post.slug,
            "title": post.title,
            "content": post.content,
            "status": post.status.value,
            "createdAt": post.createdAt.isoformat(),
        }

        # Only published posts show up in the timeline index
        if post.status == PostStatus.published:
            item["GSI_PostsByDate_PK"] = TIMELINE_PK
            item["GSI_PostsByDate_SK"] = timeline_key(post)

        try:
            self.table.put_item(
                Item=item, ConditionExpression="attribute_not_exists(PK)"
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise PostExistsError(
                    f"Post {post.publishedOn}/{post.slug} already exists"
                )
            raise Exception(f"Failed to create post: {e}")

        logger.info("Created post %s/%s", post.publishedOn, post.slug)
        return post

    def get_post(self, published_on: date, slug: str) -> Optional[Post]:
        try:
            response = self.table.get_item(Key=post_key(published_on, slug))
        except ClientError as e:
            raise Exception(f"Failed to get post: {e}")

        item = response.get("Item")
        return self._to_post(item) if item else None

    def get_previous(self, post: Post) -> Optional[Post]:
        """The next older published post"""
        return self._neighbour(Key("GSI_PostsByDate_SK").lt(timeline_key(post)), False)

    def get_next(self, post: Post) -> Optional[Post]:
        """The next newer published post"""
        return self._neighbour(Key("GSI_PostsByDate_SK").gt(timeline_key(post)), True)

    def get_published_page(self, page_index: int, page_size: int) -> PostPage:
        """Published posts, newest first, cut into pages of page_size"""
        total_count = self.count_published()

        start = page_index * page_size
        items = []
        if start < total_count:
            for position, post in enumerate(self._published(limit=start + page_size)):
                if position >= start:
                    items.append(post)

        return PostPage(
            items=items,
            pageIndex=page_index,
            pageSize=page_size,
            totalCount=total_count,
        )

    def find_all_published(self) -> List[Post]:
        return list(self._published())

    def count_published(self) -> int:
        count = 0
        last_evaluated_key = None
        while True:
            query_params = {
                "IndexName": "GSI_PostsByDate",
                "KeyConditionExpression": Key("GSI_PostsByDate_PK").eq(TIMELINE_PK),
                "Select": "COUNT",
            }
            if last_evaluated_key:
                query_params["ExclusiveStartKey"] = last_evaluated_key

            response = self.table.query(**query_params)
            count += response["Count"]

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break
        return count

    def _published(self, limit: Optional[int] = None) -> Iterator[Post]:
        fetched = 0
        last_evaluated_key = None
        while True:
            query_params = {
                "IndexName": "GSI_PostsByDate",
                "KeyConditionExpression": Key("GSI_PostsByDate_PK").eq(TIMELINE_PK),
                "ScanIndexForward": False,
            }
            if limit is not None:
                query_params["Limit"] = limit - fetched
            if last_evaluated_key:
                query_params["ExclusiveStartKey"] = last_evaluated_key

            response = self.table.query(**query_params)
            for item in response.get("Items", []):
                fetched += 1
                yield self._to_post(item)

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key or (limit is not None and fetched >= limit):
                break

    def _neighbour(self, sort_key_condition, ascending: bool) -> Optional[Post]:
        response = self.table.query(
            IndexName="GSI_PostsByDate",
            KeyConditionExpression=Key("GSI_PostsByDate_PK").eq(TIMELINE_PK)
            & sort_key_condition,
            ScanIndexForward=ascending,
            Limit=1,
        )
        items = response.get("Items", [])
        return self._to_post(items[0]) if items else None

    @staticmethod
    def _to_post(item: Dict[str, Any]) -> Post:
        return Post(
            publishedOn=date.fromisoformat(item["publishedOn"]),
            slug=item["slug"],
            title=item["title"],
            content=item["content"],
            status=item["status"],
            createdAt=datetime.fromisoformat(item["createdAt"]),
        )
