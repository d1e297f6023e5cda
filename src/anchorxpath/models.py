from __future__ import annotations

from dataclasses import dataclass

from .selector_rules import (
    MAX_ANCESTOR_DEPTH,
    MAX_LABEL_LENGTH,
    MIN_STABLE_TEXT_LENGTH,
)

STABLE_ATTRIBUTES: tuple[str, ...] = (
    "data-testid",
    "data-cy",
    "data-qa",
    "id",
    "name",
    "role",
    "placeholder",
)

# Semantic and structural tags that are usually singletons on a page.
UNIQUE_TAG_WHITELIST: frozenset[str] = frozenset(
    {
        "body",
        "main",
        "header",
        "footer",
        "nav",
        "aside",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "form",
        "search",
        "video",
        "audio",
        "canvas",
        "iframe",
        "table",
        "thead",
        "tbody",
        "tfoot",
    }
)


@dataclass(frozen=True, slots=True)
class GeneratorSettings:
    stable_attributes: tuple[str, ...] = STABLE_ATTRIBUTES
    unique_tags: frozenset[str] = UNIQUE_TAG_WHITELIST
    max_ancestor_depth: int = MAX_ANCESTOR_DEPTH
    min_label_length: int = MIN_STABLE_TEXT_LENGTH
    max_label_length: int = MAX_LABEL_LENGTH

    def __post_init__(self) -> None:
        if self.max_ancestor_depth < 0:
            raise ValueError("max_ancestor_depth must not be negative")
        if self.min_label_length > self.max_label_length:
            raise ValueError("min_label_length must not exceed max_label_length")


@dataclass(frozen=True, slots=True)
class Candidate:
    selector: str
    score: int
    strategy: str = ""


@dataclass(frozen=True, slots=True)
class StableAttribute:
    name: str
    value: str


@dataclass(slots=True)
class HistoryItem:
    selector: str
    page_url: str
    icon_url: str
    timestamp: int
    inner_text: str = ""
