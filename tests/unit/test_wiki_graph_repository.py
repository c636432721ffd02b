"""Unit tests for the page/link/category repository."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from sqlalchemy.exc import SQLAlchemyError

from topic_suggest.core.exceptions import CategoryLookupError, GraphLookupError
from topic_suggest.repositories import wiki_graph_repository
from topic_suggest.repositories.wiki_graph_repository import WikiGraphRepository
from topic_suggest.services.suggest.types import CategoryRef, LinkOccurrence, TopicKind


class _FakeScalars:
    def __init__(self, values: list[Any]) -> None:
        self._values = values

    def all(self) -> list[Any]:
        return list(self._values)


class _FakeResult:
    def __init__(self, rows: list[Any]) -> None:
        self._rows = rows

    def all(self) -> list[Any]:
        return list(self._rows)

    def scalars(self) -> _FakeScalars:
        return _FakeScalars(self._rows)


class _FakeSession:
    def __init__(
        self,
        *,
        results: list[list[Any]] | None = None,
        pages: dict[int, Any] | None = None,
        scalar_value: Any = None,
        error: Exception | None = None,
        error_count: int | None = None,
    ) -> None:
        self._results = list(results or [])
        self._pages = pages or {}
        self._scalar_value = scalar_value
        self._error = error
        self._error_count = error_count
        self.statements: list[Any] = []
        self.rollback_calls = 0

    async def execute(self, statement: Any) -> _FakeResult:
        self.statements.append(statement)
        if self._error is not None and self._error_count != 0:
            if self._error_count is not None:
                self._error_count -= 1
            raise self._error
        return _FakeResult(self._results.pop(0))

    async def rollback(self) -> None:
        self.rollback_calls += 1

    async def get(self, _model: Any, key: int) -> Any:
        return self._pages.get(key)

    async def scalar(self, statement: Any) -> Any:
        self.statements.append(statement)
        return self._scalar_value


def _page(page_id: int, page_type: str, title: str) -> SimpleNamespace:
    return SimpleNamespace(id=page_id, page_type=page_type, title=title)


@pytest.mark.asyncio
async def test_resolve_maps_page_types_to_topic_kinds() -> None:
    session = _FakeSession(
        pages={
            1: _page(1, "article", "Hiking"),
            2: _page(2, "category", "Category:Hiking"),
            3: _page(3, "disambiguation", "Hike"),
        }
    )
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    article = await repository.resolve(1)
    category = await repository.resolve(2)
    other = await repository.resolve(3)

    assert article is not None and article.kind is TopicKind.ARTICLE
    assert article.title == "Hiking"
    assert category is not None and category.kind is TopicKind.CATEGORY
    assert other is not None and other.kind is TopicKind.OTHER
    assert await repository.resolve(404) is None


@pytest.mark.asyncio
async def test_resolve_many_queries_in_chunks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(wiki_graph_repository, "RESOLVE_CHUNK_SIZE", 2)
    session = _FakeSession(
        results=[
            [_page(1, "article", "A"), _page(2, "article", "B")],
            [_page(3, "category", "C")],
        ]
    )
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    topics = await repository.resolve_many([1, 2, 3, 2])

    assert sorted(topics) == [1, 2, 3]
    assert topics[3].kind is TopicKind.CATEGORY
    assert len(session.statements) == 2


@pytest.mark.asyncio
async def test_links_count_sentence_occurrences() -> None:
    session = _FakeSession(
        results=[
            [(5, [0, 4, 9]), (6, [])],
            [(7, [2])],
        ]
    )
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    out_links = await repository.links_out(1)
    in_links = await repository.links_in(1)

    assert out_links == [LinkOccurrence(5, 3), LinkOccurrence(6, 0)]
    assert in_links == [LinkOccurrence(7, 1)]


@pytest.mark.asyncio
async def test_parent_categories_returns_category_refs() -> None:
    session = _FakeSession(results=[[(20, "Category:Tramping"), (30, "Category:New Zealand")]])
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    categories = await repository.parent_categories(1)

    assert categories == [
        CategoryRef(id=20, title="Category:Tramping"),
        CategoryRef(id=30, title="Category:New Zealand"),
    ]


@pytest.mark.asyncio
async def test_link_read_failures_raise_graph_lookup_error() -> None:
    session = _FakeSession(error=SQLAlchemyError("relation page_links does not exist"))
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    with pytest.raises(GraphLookupError):
        await repository.links_out(1)


@pytest.mark.asyncio
async def test_category_read_failures_raise_category_lookup_error() -> None:
    session = _FakeSession(error=SQLAlchemyError("relation category_links does not exist"))
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    with pytest.raises(CategoryLookupError):
        await repository.parent_categories(1)


@pytest.mark.asyncio
async def test_count_articles() -> None:
    repository = WikiGraphRepository(_FakeSession(scalar_value=1234))  # type: ignore[arg-type]

    assert await repository.count_articles() == 1234


@pytest.mark.asyncio
async def test_failed_read_rolls_back_so_later_reads_succeed() -> None:
    session = _FakeSession(
        results=[[(7, [2])], [(20, "Category:Tramping")]],
        error=SQLAlchemyError("canceling statement due to statement timeout"),
        error_count=1,
    )
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    with pytest.raises(GraphLookupError):
        await repository.links_in(1)

    assert session.rollback_calls == 1
    assert await repository.links_in(2) == [LinkOccurrence(7, 1)]
    assert await repository.parent_categories(2) == [CategoryRef(id=20, title="Category:Tramping")]
    assert session.rollback_calls == 1


@pytest.mark.asyncio
async def test_ids_outside_bigint_range_resolve_to_nothing() -> None:
    session = _FakeSession(results=[[_page(1, "article", "A")]])
    repository = WikiGraphRepository(session)  # type: ignore[arg-type]

    assert await repository.resolve(99999999999999999999) is None
    assert await repository.resolve(-(2**63) - 1) is None
    topics = await repository.resolve_many([1, 2**63])

    assert list(topics) == [1]
    assert len(session.statements) == 1
