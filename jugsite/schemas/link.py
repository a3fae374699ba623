from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LinkType(str, Enum):
    generic = "generic"
    sponsor = "sponsor"


class LinkBase(BaseModel):
    url: str = Field(min_length=1)
    title: str = Field(min_length=1)
    type: LinkType = LinkType.generic
    sortCol: int = Field(0, ge=0)


class LinkCreate(LinkBase):
    pass


class Link(LinkBase):
    """A link shown on the index page, grouped by its type"""

    model_config = ConfigDict(frozen=True)
