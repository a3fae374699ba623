import logging
from typing import Any, Dict, List

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from jugsite.schemas.link import Link, LinkCreate, LinkType

logger = logging.getLogger(__name__)

LINKS_PK = "LINKS"


def link_sort_key(link: Link) -> str:
    """Orders links by type, then sort column, then title"""
    return f"TYPE#{link.type.value}#SORT#{link.sortCol:06d}#TITLE#{link.title}#URL#{link.url}"


class LinkService:
    def __init__(self, dynamodb_resource, table_name="CommunityApp"):
        self.dynamodb = dynamodb_resource
        self.table = dynamodb_resource.Table(table_name)

    def create_link(self, link_data: LinkCreate) -> Link:
        link = Link(**link_data.model_dump())
        try:
            self.table.put_item(
                Item={
                    "PK": LINKS_PK,
                    "SK": link_sort_key(link),
                    "url": link.url,
                    "title": link.title,
                    "type": link.type.value,
                    "sortCol": link.sortCol,
                }
            )
        except ClientError as e:
            raise Exception(f"Failed to create link: {e}")

        logger.info("Created %s link %s", link.type.value, link.url)
        return link

    def find_all_ordered(self) -> List[Link]:
        """All links ordered by type, sort column and title"""
        links = []
        last_evaluated_key = None
        while True:
            query_params = {"KeyConditionExpression": Key("PK").eq(LINKS_PK)}
            if last_evaluated_key:
                query_params["ExclusiveStartKey"] = last_evaluated_key

            response = self.table.query(**query_params)
            links.extend(self._to_link(item) for item in response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break
        return links

    def find_grouped_by_type(self) -> Dict[LinkType, List[Link]]:
        grouped: Dict[LinkType, List[Link]] = {}
        for link in self.find_all_ordered():
            grouped.setdefault(link.type, []).append(link)
        return grouped

    @staticmethod
    def _to_link(item: Dict[str, Any]) -> Link:
        return Link(
            url=item["url"],
            title=item["title"],
            type=item["type"],
            sortCol=int(item["sortCol"]),
        )
