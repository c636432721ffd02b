"""Domain types for topic suggestion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TopicKind(str, Enum):
    """Kind of an addressable topic in the graph."""

    ARTICLE = "article"
    CATEGORY = "category"
    OTHER = "other"

    @classmethod
    def from_page_type(cls, page_type: str | None) -> "TopicKind":
        """Map a stored page type onto a topic kind; unknown types are OTHER."""
        try:
            return cls(str(page_type or "").strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True, slots=True)
class Topic:
    """A resolved topic."""

    id: int
    kind: TopicKind
    title: str


@dataclass(frozen=True, slots=True)
class LinkOccurrence:
    """A link with `target_id` at its far end, seen in `count` sentences."""

    target_id: int
    count: int


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """A parent category of a topic."""

    id: int
    title: str


@dataclass(frozen=True, slots=True)
class Candidate:
    """A topic linked from or to the seeds, weighted by link occurrences."""

    id: int
    kind: TopicKind
    title: str
    weight: float


@dataclass(frozen=True, slots=True)
class RefinedSuggestion:
    """A candidate that passed relatedness filtering; weight is mean relatedness."""

    id: int
    kind: TopicKind
    title: str
    weight: float


@dataclass(slots=True)
class SuggestionGroup:
    """Suggestions sharing one parent category.

    `weight` is derived from `members` and `ignored_ids`; use
    `recalculate_group_weight` after changing either.
    """

    id: int
    title: str
    members: list[RefinedSuggestion] = field(default_factory=list)
    ignored_ids: set[int] = field(default_factory=set)
    weight: float = 0.0

    @property
    def non_ignored_size(self) -> int:
        return len(self.members) - len(self.ignored_ids)

    def is_ignored(self, topic_id: int) -> bool:
        return topic_id in self.ignored_ids


@dataclass(frozen=True, slots=True)
class RefineOptions:
    search_space: int
    min_individual: float
    min_average: float
    max_suggestions: int


@dataclass(frozen=True, slots=True)
class AggregateOptions:
    max_categories: int


@dataclass(frozen=True, slots=True)
class SuggestOptions:
    """Per-request tuning of the suggestion pipeline."""

    max_suggestions: int = 250
    max_categories: int = 25
    search_space: int = 100_000
    min_individual_relatedness: float = 0.2
    min_average_relatedness: float = 0.3

    def refine_options(self) -> RefineOptions:
        return RefineOptions(
            search_space=self.search_space,
            min_individual=self.min_individual_relatedness,
            min_average=self.min_average_relatedness,
            max_suggestions=self.max_suggestions,
        )

    def aggregate_options(self) -> AggregateOptions:
        return AggregateOptions(max_categories=self.max_categories)


@dataclass(slots=True)
class SuggestResult:
    """Categorized and uncategorized suggestions for one request."""

    seeds: list[Topic]
    suggestions: list[RefinedSuggestion]
    categories: list[SuggestionGroup]
    uncategorized: list[RefinedSuggestion]


def rank_key(item: Candidate | RefinedSuggestion | SuggestionGroup) -> tuple[float, int]:
    """Sort key for weight descending, id ascending."""
    return (-item.weight, item.id)
