from .event import Event, EventBase, EventCreate, EventStatus
from .link import Link, LinkBase, LinkCreate, LinkType
from .post import Post, PostBase, PostCreate, PostPage, PostStatus
from .registration import Registration, RegistrationForm, RegistrationInput

__all__ = [
    "Event",
    "EventBase",
    "EventCreate",
    "EventStatus",
    "Link",
    "LinkBase",
    "LinkCreate",
    "LinkType",
    "Post",
    "PostBase",
    "PostCreate",
    "PostPage",
    "PostStatus",
    "Registration",
    "RegistrationForm",
    "RegistrationInput",
]
