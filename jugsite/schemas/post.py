from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostStatus(str, Enum):
    draft = "draft"
    published = "published"


class PostBase(BaseModel):
    publishedOn: date
    slug: str = Field(min_length=1, pattern=r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
    title: str
    content: str
    status: PostStatus = PostStatus.draft


class PostCreate(PostBase):
    pass


class Post(PostBase):
    """A stored post, identified by (publishedOn, slug)"""

    model_config = ConfigDict(frozen=True)

    createdAt: datetime

    @classmethod
    def create(
        cls,
        publishedOn: date,
        slug: str,
        title: str,
        content: str,
        status: PostStatus = PostStatus.draft,
        createdAt: Optional[datetime] = None,
    ) -> "Post":
        return cls(
            publishedOn=publishedOn,
            slug=slug,
            title=title,
            content=content,
            status=status,
            createdAt=createdAt or datetime.now(timezone.utc),
        )


class PostPage(BaseModel):
    """One page of published posts plus what is needed to paginate"""

    items: List[Post]
    pageIndex: int = Field(ge=0)
    pageSize: int = Field(gt=0)
    totalCount: int = Field(ge=0)

    @property
    def hasPrevious(self) -> bool:
        return self.pageIndex > 0

    @property
    def hasNext(self) -> bool:
        return (self.pageIndex + 1) * self.pageSize < self.totalCount
