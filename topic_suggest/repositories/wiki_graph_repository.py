"""Repository for the page, link and category tables.

Implements the topic, link-graph and category ports of the suggestion
pipeline on one async session.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from topic_suggest.core.db_retry import run_with_transient_db_retry
from topic_suggest.core.exceptions import CategoryLookupError, GraphLookupError
from topic_suggest.models.page import CategoryLink, Page, PageLink
from topic_suggest.services.suggest.types import CategoryRef, LinkOccurrence, Topic, TopicKind

logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")

# Stays well below the Postgres bind parameter limit.
RESOLVE_CHUNK_SIZE = 5000

# Page ids are BIGINT; ids outside that range cannot exist.
MIN_PAGE_ID = -(2**63)
MAX_PAGE_ID = 2**63 - 1


def page_to_topic(page: Page) -> Topic:
    return Topic(
        id=int(page.id),
        kind=TopicKind.from_page_type(page.page_type),
        title=page.title,
    )


class WikiGraphRepository:
    """Reads topics, links and categories through short retrying queries."""

    def __init__(self, session: AsyncSession, *, attempts: int = 3) -> None:
        self.session = session
        self.attempts = attempts

    async def _read(
        self,
        operation: Callable[[], Awaitable[_ResultT]],
        *,
        operation_name: str,
        topic_id: int | None = None,
    ) -> _ResultT:
        try:
            return await run_with_transient_db_retry(
                operation,
                operation_name=operation_name,
                attempts=self.attempts,
                log_context={"topic_id": topic_id},
            )
        except SQLAlchemyError:
            # A failed statement aborts the transaction for every later read.
            await self._rollback(operation_name)
            raise

    async def _rollback(self, operation_name: str) -> None:
        try:
            await self.session.rollback()
        except InterfaceError:
            logger.warning(
                "Rollback after failed read failed (connection likely closed)",
                extra={"operation": operation_name},
            )

    async def resolve(self, topic_id: int) -> Topic | None:
        if not MIN_PAGE_ID <= topic_id <= MAX_PAGE_ID:
            return None

        async def _get() -> Page | None:
            return await self.session.get(Page, topic_id)

        page = await self._read(_get, operation_name="page_get", topic_id=topic_id)
        return page_to_topic(page) if page is not None else None

    async def resolve_many(self, topic_ids: Iterable[int]) -> dict[int, Topic]:
        ids = [
            topic_id
            for topic_id in dict.fromkeys(int(topic_id) for topic_id in topic_ids)
            if MIN_PAGE_ID <= topic_id <= MAX_PAGE_ID
        ]
        topics: dict[int, Topic] = {}

        for start in range(0, len(ids), RESOLVE_CHUNK_SIZE):
            chunk = ids[start:start + RESOLVE_CHUNK_SIZE]

            async def _select(chunk: list[int] = chunk) -> list[Page]:
                result = await self.session.execute(select(Page).where(Page.id.in_(chunk)))
                return list(result.scalars().all())

            for page in await self._read(_select, operation_name="page_resolve_many"):
                topics[int(page.id)] = page_to_topic(page)

        return topics

    async def links_out(self, topic_id: int) -> list[LinkOccurrence]:
        async def _select() -> list[LinkOccurrence]:
            result = await self.session.execute(
                select(PageLink.target_id, PageLink.sentence_indexes).where(
                    PageLink.source_id == topic_id
                )
            )
            return [
                LinkOccurrence(target_id=int(target_id), count=len(sentences or []))
                for target_id, sentences in result.all()
            ]

        try:
            return await self._read(_select, operation_name="links_out", topic_id=topic_id)
        except SQLAlchemyError as exc:
            raise GraphLookupError(topic_id, str(exc)) from exc

    async def links_in(self, topic_id: int) -> list[LinkOccurrence]:
        async def _select() -> list[LinkOccurrence]:
            result = await self.session.execute(
                select(PageLink.source_id, PageLink.sentence_indexes).where(
                    PageLink.target_id == topic_id
                )
            )
            return [
                LinkOccurrence(target_id=int(source_id), count=len(sentences or []))
                for source_id, sentences in result.all()
            ]

        try:
            return await self._read(_select, operation_name="links_in", topic_id=topic_id)
        except SQLAlchemyError as exc:
            raise GraphLookupError(topic_id, str(exc)) from exc

    async def parent_categories(self, topic_id: int) -> list[CategoryRef]:
        async def _select() -> list[CategoryRef]:
            result = await self.session.execute(
                select(Page.id, Page.title)
                .join(CategoryLink, CategoryLink.category_id == Page.id)
                .where(CategoryLink.page_id == topic_id)
                .order_by(Page.id.asc())
            )
            return [CategoryRef(id=int(category_id), title=title) for category_id, title in result.all()]

        try:
            return await self._read(_select, operation_name="parent_categories", topic_id=topic_id)
        except SQLAlchemyError as exc:
            raise CategoryLookupError(topic_id, str(exc)) from exc

    async def count_articles(self) -> int:
        async def _count() -> int:
            total = await self.session.scalar(
                select(func.count()).select_from(Page).where(Page.page_type == TopicKind.ARTICLE.value)
            )
            return int(total or 0)

        return await self._read(_count, operation_name="count_articles")
