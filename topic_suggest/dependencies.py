"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from topic_suggest.config import settings
from topic_suggest.core.database import get_session
from topic_suggest.core.redis import get_redis_client
from topic_suggest.repositories.wiki_graph_repository import WikiGraphRepository
from topic_suggest.services.relatedness import (
    LinkRelatednessOracle,
    RedisRelatednessStore,
    RelatednessCache,
)
from topic_suggest.services.suggest.service import SuggestService

DbSession = Annotated[AsyncSession, Depends(get_session)]


def build_relatedness_cache(repository: WikiGraphRepository) -> RelatednessCache:
    """Request-scoped relatedness memo over the link oracle and the shared store."""
    oracle = LinkRelatednessOracle(
        repository,
        article_count=settings.relatedness_article_count,
        count_articles=repository.count_articles,
    )
    store = None
    if settings.relatedness_cache_enabled:
        store = RedisRelatednessStore(get_redis_client(), ttl_seconds=settings.cache_ttl_seconds)
    return RelatednessCache(oracle, store)


async def get_suggest_service(session: DbSession) -> SuggestService:
    """Build a suggestion service bound to the request's session."""
    repository = WikiGraphRepository(session)
    return SuggestService(
        topics=repository,
        graph=repository,
        categories=repository,
        relatedness=build_relatedness_cache(repository),
    )


SuggestServiceDep = Annotated[SuggestService, Depends(get_suggest_service)]
