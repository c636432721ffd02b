"""Relatedness filtering and re-ranking of rough candidates."""

from __future__ import annotations

import logging

from topic_suggest.services.suggest.contracts import RelatednessPort
from topic_suggest.services.suggest.types import (
    Candidate,
    RefinedSuggestion,
    RefineOptions,
    Topic,
    TopicKind,
    rank_key,
)

logger = logging.getLogger(__name__)


async def mean_relatedness(
    candidate: Candidate,
    seeds: list[Topic],
    relatedness: RelatednessPort,
    *,
    min_individual: float,
) -> float | None:
    """Mean relatedness of a candidate to all seeds.

    Returns None as soon as one seed scores below `min_individual`; the
    remaining seeds are not scored.
    """
    total = 0.0
    for seed in seeds:
        score = await relatedness.score(seed.id, candidate.id)
        if score < min_individual:
            return None
        total += score
    return total / len(seeds)


async def refine_suggestions(
    candidates: list[Candidate],
    seeds: list[Topic],
    relatedness: RelatednessPort,
    options: RefineOptions,
) -> list[RefinedSuggestion]:
    """Filter candidates by relatedness to the seeds and rank by mean relatedness.

    Candidates are examined in rough-weight order and the scan stops after
    `search_space + 1` of them, whether or not they pass. A failure while
    scoring one candidate drops only that candidate.
    """
    if not seeds:
        return []

    refined: list[RefinedSuggestion] = []
    examined = 0
    failures = 0

    for candidate in candidates:
        if examined > options.search_space:
            break
        examined += 1

        if candidate.kind is not TopicKind.ARTICLE:
            continue

        try:
            mean = await mean_relatedness(
                candidate,
                seeds,
                relatedness,
                min_individual=options.min_individual,
            )
        except Exception as exc:
            failures += 1
            logger.warning(
                "Relatedness lookup failed; skipping candidate",
                extra={"candidate_id": candidate.id, "error": str(exc)},
            )
            continue

        if mean is None or mean < options.min_average:
            continue

        refined.append(
            RefinedSuggestion(
                id=candidate.id,
                kind=candidate.kind,
                title=candidate.title,
                weight=mean,
            )
        )

    refined.sort(key=rank_key)

    logger.info(
        "Refined suggestions",
        extra={
            "examined": examined,
            "accepted": len(refined),
            "failures": failures,
            "returned": min(len(refined), options.max_suggestions),
        },
    )
    return refined[: max(options.max_suggestions, 0)]
