"""SQLAlchemy database models."""
from topic_suggest.models.base import Base
from topic_suggest.models.page import CategoryLink, Page, PageLink

__all__ = [
    "Base",
    "Page",
    "PageLink",
    "CategoryLink",
]
