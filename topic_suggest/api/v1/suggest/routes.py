"""Suggest API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from topic_suggest.api.v1.suggest.constants import (
    INVALID_QUERY_TOPICS_DETAIL,
    SUGGEST_DESCRIPTION,
)
from topic_suggest.config import settings
from topic_suggest.core.exceptions import MissingSeedTopicsError, NoValidSeedTopicsError
from topic_suggest.dependencies import SuggestServiceDep
from topic_suggest.schemas.suggest import SuggestResponse
from topic_suggest.services.suggest.types import SuggestOptions

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_topic_ids(raw: str | None) -> list[int]:
    """Parse a comma-separated list of topic ids; blank entries are skipped."""
    if raw is None:
        return []

    topic_ids: list[int] = []
    for token in raw.split(","):
        cleaned = token.strip()
        if not cleaned:
            continue
        try:
            topic_ids.append(int(cleaned))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=INVALID_QUERY_TOPICS_DETAIL.format(token=cleaned),
            ) from None
    return topic_ids


@router.get(
    "",
    response_model=SuggestResponse,
    summary="Suggest related topics",
    description=SUGGEST_DESCRIPTION,
)
async def suggest_topics(
    service: SuggestServiceDep,
    query_topics: str | None = Query(
        None,
        alias="queryTopics",
        description="A comma-separated set of topic ids that suggestions should relate to",
    ),
    max_suggestions: int = Query(
        settings.suggest_max_suggestions,
        alias="maxSuggestions",
        ge=0,
        description="Maximum number of suggested topics to return",
    ),
    max_categories: int = Query(
        settings.suggest_max_categories,
        alias="maxCategories",
        ge=0,
        description="Maximum number of categories to organize suggestions under",
    ),
    search_space: int = Query(
        settings.suggest_search_space,
        alias="searchSpace",
        ge=0,
        description=(
            "Maximum number of rough suggestions to search. Increasing this will likely "
            "provide better suggestions, but slower responses"
        ),
    ),
    min_individual_relatedness: float = Query(
        settings.suggest_min_individual_relatedness,
        alias="minIndividualRelatedness",
        description="Minimum relatedness a suggestion must have to each query topic",
    ),
    min_average_relatedness: float = Query(
        settings.suggest_min_average_relatedness,
        alias="minAverageRelatedness",
        description="Minimum average relatedness a suggestion must have to all query topics",
    ),
) -> SuggestResponse:
    """Suggest topics related to the query topics, organized by category."""
    topic_ids = parse_topic_ids(query_topics)
    options = SuggestOptions(
        max_suggestions=max_suggestions,
        max_categories=max_categories,
        search_space=search_space,
        min_individual_relatedness=min_individual_relatedness,
        min_average_relatedness=min_average_relatedness,
    )

    try:
        result = await service.suggest(topic_ids, options)
    except MissingSeedTopicsError:
        return SuggestResponse(unspecified_parameters=True)
    except NoValidSeedTopicsError as exc:
        logger.info("No valid query topics", extra=exc.details)
        return SuggestResponse(error=exc.message)

    return SuggestResponse.from_result(result)
