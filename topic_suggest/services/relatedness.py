"""Relatedness scoring between topics and its caches."""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable
from typing import Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from topic_suggest.core.exceptions import RelatednessLookupError
from topic_suggest.services.suggest.contracts import LinkGraphPort, RelatednessPort

logger = logging.getLogger(__name__)


class RelatednessStore(Protocol):
    """Shared store of computed relatedness scores."""

    async def get(self, topic_a: int, topic_b: int) -> float | None:
        """Stored score, or None on a miss."""

    async def set(self, topic_a: int, topic_b: int, score: float) -> None:
        """Store a score."""


class RedisRelatednessStore:
    """Relatedness scores shared across requests through Redis."""

    KEY_PREFIX = "relatedness"

    def __init__(self, client: Redis, *, ttl_seconds: int) -> None:
        self._client = client
        self.ttl_seconds = ttl_seconds

    def _key(self, topic_a: int, topic_b: int) -> str:
        return f"{self.KEY_PREFIX}:{topic_a}:{topic_b}"

    async def get(self, topic_a: int, topic_b: int) -> float | None:
        raw = await self._client.get(self._key(topic_a, topic_b))
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError):
            return None

    async def set(self, topic_a: int, topic_b: int, score: float) -> None:
        await self._client.set(self._key(topic_a, topic_b), repr(score), ex=self.ttl_seconds)


class RelatednessCache:
    """Memoizes an oracle's scores for one request, optionally backed by a shared store.

    Store failures degrade to cache misses. Oracle failures propagate.
    """

    def __init__(
        self,
        oracle: RelatednessPort,
        store: RelatednessStore | None = None,
    ) -> None:
        self.oracle = oracle
        self.store = store
        self._scores: dict[tuple[int, int], float] = {}
        self.hits = 0
        self.misses = 0

    async def score(self, topic_a: int, topic_b: int) -> float:
        key = (topic_a, topic_b)
        cached = self._scores.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        stored = await self._read_store(topic_a, topic_b)
        if stored is not None:
            self.hits += 1
            self._scores[key] = stored
            return stored

        self.misses += 1
        value = await self.oracle.score(topic_a, topic_b)
        self._scores[key] = value
        await self._write_store(topic_a, topic_b, value)
        return value

    async def _read_store(self, topic_a: int, topic_b: int) -> float | None:
        if self.store is None:
            return None
        try:
            return await self.store.get(topic_a, topic_b)
        except RedisError as exc:
            logger.warning(
                "Relatedness store read failed",
                extra={"topic_a": topic_a, "topic_b": topic_b, "error": str(exc)},
            )
            return None

    async def _write_store(self, topic_a: int, topic_b: int, value: float) -> None:
        if self.store is None:
            return
        try:
            await self.store.set(topic_a, topic_b, value)
        except RedisError as exc:
            logger.warning(
                "Relatedness store write failed",
                extra={"topic_a": topic_a, "topic_b": topic_b, "error": str(exc)},
            )


def link_relatedness(in_links_a: set[int], in_links_b: set[int], article_count: int) -> float:
    """Normalized link distance between two in-link sets, as a similarity in [0, 1]."""
    if not in_links_a or not in_links_b:
        return 0.0
    overlap = len(in_links_a & in_links_b)
    if overlap == 0:
        return 0.0

    larger = max(len(in_links_a), len(in_links_b))
    smaller = min(len(in_links_a), len(in_links_b))

    numerator = math.log(larger) - math.log(overlap)
    if numerator <= 0:
        return 1.0
    denominator = math.log(max(article_count, larger)) - math.log(smaller)
    if denominator <= 0:
        return 0.0
    return max(0.0, min(1.0, 1.0 - numerator / denominator))


class LinkRelatednessOracle:
    """Scores relatedness from the overlap of the topics' in-links.

    The total article count is either given up front or read once through
    `count_articles` on the first score.
    """

    def __init__(
        self,
        graph: LinkGraphPort,
        *,
        article_count: int | None = None,
        count_articles: Callable[[], Awaitable[int]] | None = None,
    ) -> None:
        if article_count is None and count_articles is None:
            raise ValueError("article_count or count_articles is required")
        self.graph = graph
        self.article_count = article_count
        self._count_articles = count_articles
        self._in_links: dict[int, set[int]] = {}

    async def _total_articles(self) -> int:
        if self.article_count is None and self._count_articles is not None:
            self.article_count = await self._count_articles()
        return self.article_count or 0

    async def _in_link_ids(self, topic_id: int) -> set[int]:
        cached = self._in_links.get(topic_id)
        if cached is None:
            cached = {link.target_id for link in await self.graph.links_in(topic_id)}
            self._in_links[topic_id] = cached
        return cached

    async def score(self, topic_a: int, topic_b: int) -> float:
        if topic_a == topic_b:
            return 1.0
        try:
            in_links_a = await self._in_link_ids(topic_a)
            in_links_b = await self._in_link_ids(topic_b)
            article_count = await self._total_articles()
        except Exception as exc:
            raise RelatednessLookupError(topic_a, topic_b, str(exc)) from exc
        return link_relatedness(in_links_a, in_links_b, article_count)
