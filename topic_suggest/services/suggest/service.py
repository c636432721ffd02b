"""Suggest topics related to a set of seed topics, organized by category."""

from __future__ import annotations

import logging

from topic_suggest.core.exceptions import MissingSeedTopicsError, NoValidSeedTopicsError
from topic_suggest.services.suggest.candidates import generate_candidates
from topic_suggest.services.suggest.categories import (
    aggregate_categories,
    uncategorized_suggestions,
)
from topic_suggest.services.suggest.contracts import (
    CategoryPort,
    LinkGraphPort,
    RelatednessPort,
    TopicPort,
)
from topic_suggest.services.suggest.refiner import refine_suggestions
from topic_suggest.services.suggest.types import SuggestOptions, SuggestResult, Topic, TopicKind

logger = logging.getLogger(__name__)


async def resolve_seed_topics(seed_ids: list[int], topics: TopicPort) -> list[Topic]:
    """Resolve seed ids to existing articles; duplicates collapse to the first."""
    if not seed_ids:
        raise MissingSeedTopicsError()

    seeds: dict[int, Topic] = {}
    for topic_id in seed_ids:
        if topic_id in seeds:
            continue
        topic = await topics.resolve(topic_id)
        if topic is not None and topic.kind is TopicKind.ARTICLE:
            seeds[topic_id] = topic

    if not seeds:
        raise NoValidSeedTopicsError(seed_ids)
    return list(seeds.values())


class SuggestService:
    """Runs the candidate, refinement and category stages for one request.

    Each stage consumes the full output of the previous one. The relatedness
    port should be request scoped (see `RelatednessCache`).
    """

    def __init__(
        self,
        *,
        topics: TopicPort,
        graph: LinkGraphPort,
        categories: CategoryPort,
        relatedness: RelatednessPort,
    ) -> None:
        self.topics = topics
        self.graph = graph
        self.categories = categories
        self.relatedness = relatedness

    async def suggest(
        self,
        seed_ids: list[int],
        options: SuggestOptions | None = None,
    ) -> SuggestResult:
        options = options or SuggestOptions()
        seeds = await resolve_seed_topics(seed_ids, self.topics)

        logger.info(
            "Suggesting topics",
            extra={
                "seed_ids": [seed.id for seed in seeds],
                "max_suggestions": options.max_suggestions,
                "max_categories": options.max_categories,
                "search_space": options.search_space,
            },
        )

        candidates = await generate_candidates(seeds, self.graph, self.topics)
        suggestions = await refine_suggestions(
            candidates,
            seeds,
            self.relatedness,
            options.refine_options(),
        )
        groups, categorized_ids = await aggregate_categories(
            suggestions,
            self.categories,
            options.aggregate_options(),
        )

        return SuggestResult(
            seeds=seeds,
            suggestions=suggestions,
            categories=groups,
            uncategorized=uncategorized_suggestions(suggestions, categorized_ids),
        )
