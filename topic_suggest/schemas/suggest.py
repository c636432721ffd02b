"""Suggestion schemas."""

from __future__ import annotations

from pydantic import BaseModel

from topic_suggest.services.suggest.types import (
    RefinedSuggestion,
    SuggestionGroup,
    SuggestResult,
    Topic,
)


class QueryTopicResponse(BaseModel):
    """A seed topic the suggestions relate to."""

    id: int
    title: str


class SuggestionResponse(BaseModel):
    """A suggested topic weighted by its mean relatedness to the query topics."""

    id: int
    title: str
    weight: float

    @classmethod
    def from_suggestion(cls, suggestion: RefinedSuggestion) -> "SuggestionResponse":
        return cls(id=suggestion.id, title=suggestion.title, weight=suggestion.weight)


class SuggestionCategoryResponse(BaseModel):
    """A category and every suggestion filed under it."""

    id: int
    title: str
    weight: float
    total_suggestions: int
    suggestions: list[SuggestionResponse]

    @classmethod
    def from_group(cls, group: SuggestionGroup) -> "SuggestionCategoryResponse":
        return cls(
            id=group.id,
            title=group.title,
            weight=group.weight,
            total_suggestions=len(group.members),
            suggestions=[SuggestionResponse.from_suggestion(member) for member in group.members],
        )


class UncategorizedSuggestionsResponse(BaseModel):
    """Suggestions that no selected category lists."""

    total_suggestions: int
    suggestions: list[SuggestionResponse]


class SuggestResponse(BaseModel):
    """Schema for the suggest endpoint.

    `unspecified_parameters` is set when no query topics were given and
    `error` when none of them could be used; both come with no suggestions.
    """

    unspecified_parameters: bool = False
    error: str | None = None
    query_topics: list[QueryTopicResponse] = []
    categories: list[SuggestionCategoryResponse] = []
    uncategorized: UncategorizedSuggestionsResponse | None = None

    @classmethod
    def from_result(cls, result: SuggestResult) -> "SuggestResponse":
        return cls(
            query_topics=[_query_topic(seed) for seed in result.seeds],
            categories=[SuggestionCategoryResponse.from_group(group) for group in result.categories],
            uncategorized=UncategorizedSuggestionsResponse(
                total_suggestions=len(result.uncategorized),
                suggestions=[
                    SuggestionResponse.from_suggestion(suggestion)
                    for suggestion in result.uncategorized
                ],
            ),
        )


def _query_topic(seed: Topic) -> QueryTopicResponse:
    return QueryTopicResponse(id=seed.id, title=seed.title)
