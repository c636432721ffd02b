"""Page, link and category membership models (the topic graph)."""

from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from topic_suggest.models.base import Base


class Page(Base):
    """An addressable page: article, category, redirect, disambiguation, ..."""

    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    page_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)

    def __repr__(self) -> str:
        return f"<Page {self.id} {self.title}>"


class PageLink(Base):
    """Directed link between two pages with the sentences it occurs in."""

    __tablename__ = "page_links"
    __table_args__ = (
        Index("ix_page_links_target_source", "target_id", "source_id"),
    )

    source_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("pages.id", ondelete="CASCADE"),
        primary_key=True,
    )
    target_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("pages.id", ondelete="CASCADE"),
        primary_key=True,
    )
    sentence_indexes: Mapped[list[int]] = mapped_column(JSONB, default=list, nullable=False)

    @property
    def occurrence_count(self) -> int:
        return len(self.sentence_indexes or [])


class CategoryLink(Base):
    """Membership of a page in a parent category page."""

    __tablename__ = "category_links"

    page_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("pages.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("pages.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
