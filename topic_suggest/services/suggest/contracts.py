"""Ports the suggestion pipeline reads from."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from topic_suggest.services.suggest.types import CategoryRef, LinkOccurrence, Topic


class TopicPort(Protocol):
    """Resolves topic ids to topics."""

    async def resolve(self, topic_id: int) -> Topic | None:
        """Return the topic, or None when it does not exist."""

    async def resolve_many(self, topic_ids: Iterable[int]) -> dict[int, Topic]:
        """Return the topics that exist, keyed by id."""


class LinkGraphPort(Protocol):
    """Per-topic link lookups; unknown ids have no links."""

    async def links_out(self, topic_id: int) -> list[LinkOccurrence]:
        """Links from the topic to other topics."""

    async def links_in(self, topic_id: int) -> list[LinkOccurrence]:
        """Links from other topics to the topic."""


class RelatednessPort(Protocol):
    """Pairwise semantic relatedness in [0, 1]."""

    async def score(self, topic_a: int, topic_b: int) -> float:
        """Relatedness between two topics; may raise."""


class CategoryPort(Protocol):
    """Parent category lookup."""

    async def parent_categories(self, topic_id: int) -> list[CategoryRef]:
        """Categories the topic belongs to."""
