from __future__ import annotations

import re
from typing import Callable

MIN_STABLE_TEXT_LENGTH = 2
MAX_STABLE_TEXT_LENGTH = 40
MAX_LABEL_LENGTH = 30
MAX_ANCESTOR_DEPTH = 50

MIN_HASH_ID_LENGTH = 10
MIN_TRAILING_ID_DIGITS = 5
MAX_DYNAMIC_SUFFIX_DIGITS = 4
MIN_MINIFIED_CLASS_LENGTH = 10

FRAMEWORK_ID_PREFIXES = ("ember", "react-", "vue-")

_HASH_LIKE_ID = re.compile(rf"^[a-fA-F0-9-]{{{MIN_HASH_ID_LENGTH},}}$")
# `u_0_9_QM`, `_r_8_`: two alphanumeric tokens fenced by underscores.
_UNDERSCORE_TOKEN_RUN = re.compile(r"_[a-zA-Z0-9]+_[a-zA-Z0-9]+_")
_TRAILING_DIGIT_RUN = re.compile(rf"\d{{{MIN_TRAILING_ID_DIGITS},}}$")
_FRAMEWORK_PREFIX = re.compile(r"^(?:" + "|".join(re.escape(p) for p in FRAMEWORK_ID_PREFIXES) + r")\d*")
_DYNAMIC_SUFFIX = re.compile(rf"_\d{{1,{MAX_DYNAMIC_SUFFIX_DIGITS}}}$")

_CSS_IN_JS_CLASS = re.compile(r"^(?:css|sc)-[a-zA-Z0-9]+$")
_MINIFIED_CLASS = re.compile(rf"^[a-zA-Z0-9]{{{MIN_MINIFIED_CLASS_LENGTH},}}$")
_ANY_DIGIT = re.compile(r"\d")

_PERSON_NAME = re.compile(r"^(?:[A-Z][a-z]+ [A-Z][a-z]+|[A-Z][a-z]+ [A-Z][a-z]+ [A-Z][a-z]+)$")
_HANDLE_LIKE = re.compile(r"^[a-z]+$")
_LETTERS_AND_SPACES = re.compile(r"^[a-zA-Z ]+$")

Rule = tuple[str, Callable[[str], bool]]

# Each rule answers "is this value unstable?".
ID_REJECTION_RULES: tuple[Rule, ...] = (
    ("hash-like", lambda value: bool(_HASH_LIKE_ID.match(value))),
    ("underscore-token-run", lambda value: bool(_UNDERSCORE_TOKEN_RUN.search(value))),
    ("trailing-digit-run", lambda value: bool(_TRAILING_DIGIT_RUN.search(value))),
    ("framework-prefix", lambda value: bool(_FRAMEWORK_PREFIX.match(value))),
    ("dynamic-suffix", lambda value: bool(_DYNAMIC_SUFFIX.search(value))),
)

CLASS_REJECTION_RULES: tuple[Rule, ...] = (
    ("utility-modifier", lambda token: ":" in token or "[" in token),
    ("css-in-js", lambda token: bool(_CSS_IN_JS_CLASS.match(token))),
    ("minified", lambda token: bool(_MINIFIED_CLASS.match(token))),
    ("contains-digit", lambda token: bool(_ANY_DIGIT.search(token))),
)

TEXT_REJECTION_RULES: tuple[Rule, ...] = (
    (
        "length",
        lambda text: not MIN_STABLE_TEXT_LENGTH <= len(text) <= MAX_STABLE_TEXT_LENGTH,
    ),
    ("person-name", lambda text: bool(_PERSON_NAME.match(text))),
    ("handle-like", lambda text: bool(_HANDLE_LIKE.match(text))),
    ("not-letters-and-spaces", lambda text: not _LETTERS_AND_SPACES.match(text)),
)


def normalize_space(value: str | None, limit: int | None = None) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if limit is not None else compact


def _rejections(rules: tuple[Rule, ...], value: str) -> tuple[str, ...]:
    return tuple(name for name, rejects in rules if rejects(value))


def id_rejection_reasons(value: str | None) -> tuple[str, ...]:
    if not value:
        return ("empty",)
    return _rejections(ID_REJECTION_RULES, value)


def class_rejection_reasons(token: str | None) -> tuple[str, ...]:
    if not token:
        return ("empty",)
    return _rejections(CLASS_REJECTION_RULES, token)


def text_rejection_reasons(text: str | None) -> tuple[str, ...]:
    value = (text or "").strip()
    if not value:
        return ("empty",)
    return _rejections(TEXT_REJECTION_RULES, value)


def is_stable_id(value: str | None) -> bool:
    """Identifier (or attribute value) unlikely to be generated per render."""
    return not id_rejection_reasons(value)


def is_stable_class(token: str | None) -> bool:
    return not class_rejection_reasons(token)


def has_stable_text(text: str | None) -> bool:
    """Short letters-only text that does not read like a name or a handle."""
    return not text_rejection_reasons(text)


def stable_classes(tokens: list[str]) -> list[str]:
    return [token for token in tokens if is_stable_class(token)]
