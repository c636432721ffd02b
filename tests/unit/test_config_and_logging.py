"""Unit tests for settings parsing and log formatting."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from topic_suggest.config import Settings
from topic_suggest.core.logging import JSONExtrasFormatter


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgresql://u:p@db:5432/wiki", "postgresql+asyncpg://u:p@db:5432/wiki"),
        ("postgres://u:p@db:5432/wiki", "postgresql+asyncpg://u:p@db:5432/wiki"),
        ("postgresql+psycopg2://u:p@db/wiki", "postgresql+asyncpg://u:p@db/wiki"),
        ("postgresql+asyncpg://u:p@db/wiki", "postgresql+asyncpg://u:p@db/wiki"),
    ],
)
def test_database_url_is_normalized_to_asyncpg(raw: str, expected: str) -> None:
    assert Settings(_env_file=None, database_url=raw).database_url == expected


def test_cors_origins_accept_comma_separated_values() -> None:
    settings = Settings(_env_file=None, cors_origins="https://a.example, https://b.example")

    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_accept_json_arrays() -> None:
    settings = Settings(_env_file=None, cors_origins='["https://a.example"]')

    assert settings.cors_origins == ["https://a.example"]


def test_suggestion_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.suggest_max_suggestions == 250
    assert settings.suggest_max_categories == 25
    assert settings.suggest_search_space == 100_000
    assert settings.suggest_min_individual_relatedness == 0.2
    assert settings.suggest_min_average_relatedness == 0.3


def test_negative_suggestion_limits_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, suggest_max_categories=-1)


def test_formatter_appends_extras_as_json() -> None:
    formatter = JSONExtrasFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    record = logging.LogRecord(
        name="topic_suggest.services.suggest.refiner",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Refined suggestions",
        args=(),
        exc_info=None,
    )
    record.accepted = 12
    record.examined = 40

    line = formatter.format(record)

    head, _, extras = line.partition(" {")
    assert head.endswith("| INFO     | topic_suggest.services.suggest.refiner | Refined suggestions")
    assert json.loads("{" + extras) == {"accepted": 12, "examined": 40}


def test_formatter_without_extras_is_a_plain_line() -> None:
    formatter = JSONExtrasFormatter()
    record = logging.LogRecord(
        name="topic_suggest",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Store unavailable: %s",
        args=("redis",),
        exc_info=None,
    )

    assert formatter.format(record).endswith("| WARNING  | topic_suggest | Store unavailable: redis")
