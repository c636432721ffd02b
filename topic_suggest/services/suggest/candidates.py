"""Rough candidate generation from link overlap with the seed topics."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from topic_suggest.services.suggest.contracts import LinkGraphPort, TopicPort
from topic_suggest.services.suggest.types import Candidate, Topic, TopicKind, rank_key

logger = logging.getLogger(__name__)


async def collect_link_weights(
    seeds: Iterable[Topic],
    graph: LinkGraphPort,
) -> Counter[int]:
    """Sum link occurrences per linked topic over all seeds, both directions."""
    weights: Counter[int] = Counter()
    for seed in seeds:
        for link in await graph.links_out(seed.id) or []:
            weights[link.target_id] += link.count
        for link in await graph.links_in(seed.id) or []:
            weights[link.target_id] += link.count
    return weights


async def generate_candidates(
    seeds: list[Topic],
    graph: LinkGraphPort,
    topics: TopicPort,
) -> list[Candidate]:
    """Return every topic linked with the seeds, ordered by rough weight.

    Seeds are never candidates. Ids the topic port cannot resolve are kept
    as OTHER-kind candidates so they still occupy their rank in the search
    space.
    """
    weights = await collect_link_weights(seeds, graph)
    for seed in seeds:
        weights.pop(seed.id, None)

    resolved = await topics.resolve_many(weights.keys()) if weights else {}

    candidates: list[Candidate] = []
    for topic_id, weight in weights.items():
        topic = resolved.get(topic_id)
        candidates.append(
            Candidate(
                id=topic_id,
                kind=topic.kind if topic else TopicKind.OTHER,
                title=topic.title if topic else "",
                weight=float(weight),
            )
        )
    candidates.sort(key=rank_key)

    logger.info(
        "Gathered rough suggestions",
        extra={"seed_count": len(seeds), "candidate_count": len(candidates)},
    )
    return candidates
