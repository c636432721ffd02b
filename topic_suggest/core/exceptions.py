"""Custom exception classes for the application."""

from typing import Any


class TopicSuggestError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Request input errors
class SuggestInputError(TopicSuggestError):
    """A suggestion request cannot be answered from its input."""

    pass


class MissingSeedTopicsError(SuggestInputError):
    """No seed topic ids were supplied."""

    def __init__(self) -> None:
        super().__init__("no query topic ids specified")


class NoValidSeedTopicsError(SuggestInputError):
    """Seed topic ids were supplied but none resolve to an article."""

    def __init__(self, topic_ids: list[int]) -> None:
        super().__init__(
            "no valid query topic ids specified",
            details={"topic_ids": list(topic_ids)},
        )


# External lookup errors
class ExternalLookupError(TopicSuggestError):
    """Error reading from an external collaborator."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source} lookup error: {message}")


class RelatednessLookupError(ExternalLookupError):
    """Relatedness could not be computed for a topic pair."""

    def __init__(self, topic_a: int, topic_b: int, message: str) -> None:
        self.topic_a = topic_a
        self.topic_b = topic_b
        super().__init__("Relatedness", f"({topic_a}, {topic_b}): {message}")


class GraphLookupError(ExternalLookupError):
    """Link graph could not be read for a topic."""

    def __init__(self, topic_id: int, message: str) -> None:
        super().__init__("Link graph", f"topic {topic_id}: {message}")


class CategoryLookupError(ExternalLookupError):
    """Parent categories could not be read for a topic."""

    def __init__(self, topic_id: int, message: str) -> None:
        super().__init__("Category", f"topic {topic_id}: {message}")
