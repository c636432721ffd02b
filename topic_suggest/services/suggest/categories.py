"""Organize refined suggestions under their parent categories."""

from __future__ import annotations

import logging

from topic_suggest.services.suggest.contracts import CategoryPort
from topic_suggest.services.suggest.types import (
    AggregateOptions,
    RefinedSuggestion,
    SuggestionGroup,
    rank_key,
)

logger = logging.getLogger(__name__)

# Only the strongest credited members count toward a category's weight.
CATEGORY_WEIGHT_DEPTH = 4

MIN_INITIAL_MEMBERS = 3
MIN_INITIAL_WEIGHT = 1.0
MIN_FINAL_WEIGHT = 1.5
MIN_FINAL_CREDITED_MEMBERS = 2


def recalculate_group_weight(group: SuggestionGroup) -> float:
    """Recompute weight from the first credited members, in member order."""
    weight = 0.0
    counted = 0
    for member in group.members:
        if group.is_ignored(member.id):
            continue
        weight += member.weight
        counted += 1
        if counted >= CATEGORY_WEIGHT_DEPTH:
            break
    group.weight = weight
    return weight


async def build_groups(
    suggestions: list[RefinedSuggestion],
    categories: CategoryPort,
) -> dict[int, SuggestionGroup]:
    """Append every suggestion to each of its parent categories."""
    groups: dict[int, SuggestionGroup] = {}
    for suggestion in suggestions:
        for category in await categories.parent_categories(suggestion.id):
            group = groups.get(category.id)
            if group is None:
                group = SuggestionGroup(id=category.id, title=category.title)
                groups[category.id] = group
            group.members.append(suggestion)
    return groups


def credit_members_once(groups: list[SuggestionGroup]) -> None:
    """Credit each topic to the first (best ranked) group listing it.

    Later groups keep the topic as a member but ignore it when weighting.
    """
    credited: set[int] = set()
    for group in groups:
        for member in group.members:
            if member.id in credited:
                group.ignored_ids.add(member.id)
            else:
                credited.add(member.id)


def select_categories(
    groups: list[SuggestionGroup],
    options: AggregateOptions,
) -> list[SuggestionGroup]:
    """Weight, deduplicate and prune groups; return the survivors best first."""
    weighted: list[SuggestionGroup] = []
    for group in groups:
        recalculate_group_weight(group)
        if len(group.members) > MIN_INITIAL_MEMBERS and group.weight > MIN_INITIAL_WEIGHT:
            weighted.append(group)
    weighted.sort(key=rank_key)

    credit_members_once(weighted)
    for group in weighted:
        recalculate_group_weight(group)
    weighted.sort(key=rank_key)

    selected = [
        group
        for group in weighted
        if group.weight > MIN_FINAL_WEIGHT
        and group.non_ignored_size > MIN_FINAL_CREDITED_MEMBERS
    ]
    return selected[: max(options.max_categories, 0)]


async def aggregate_categories(
    suggestions: list[RefinedSuggestion],
    categories: CategoryPort,
    options: AggregateOptions,
) -> tuple[list[SuggestionGroup], set[int]]:
    """Group suggestions by category.

    Returns the selected groups and the ids of every topic they list,
    including members ignored for weighting.
    """
    groups = await build_groups(suggestions, categories)
    selected = select_categories(list(groups.values()), options)

    categorized_ids: set[int] = set()
    for group in selected:
        categorized_ids.update(member.id for member in group.members)

    logger.info(
        "Aggregated suggestion categories",
        extra={
            "candidate_categories": len(groups),
            "selected_categories": len(selected),
            "categorized_topics": len(categorized_ids),
        },
    )
    return selected, categorized_ids


def uncategorized_suggestions(
    suggestions: list[RefinedSuggestion],
    categorized_ids: set[int],
) -> list[RefinedSuggestion]:
    """Suggestions listed by no selected category, in suggestion order."""
    return [suggestion for suggestion in suggestions if suggestion.id not in categorized_ids]
