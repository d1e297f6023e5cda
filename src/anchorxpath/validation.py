from __future__ import annotations

import logging
from typing import Iterable

from .dom import Document, Element, ShadowRoot
from .errors import EvaluationError
from .evaluator import EvaluationContext, XPathEvaluator
from .models import Candidate

logger = logging.getLogger(__name__)


def _evaluate(evaluator: XPathEvaluator, xpath: str, context: EvaluationContext) -> list[Element]:
    text = str(xpath or "").strip()
    if not text:
        return []
    try:
        return evaluator.evaluate(text, context)
    except EvaluationError as exc:
        logger.debug("Treating %r as non-unique: %s", text, exc.reason)
        return []


def count_xpath_matches(evaluator: XPathEvaluator, xpath: str, context: EvaluationContext) -> int:
    return len(_evaluate(evaluator, xpath, context))


def single_match(evaluator: XPathEvaluator, xpath: str, context: EvaluationContext) -> Element | None:
    matches = _evaluate(evaluator, xpath, context)
    return matches[0] if len(matches) == 1 else None


def is_unique(evaluator: XPathEvaluator, xpath: str, context: EvaluationContext) -> bool:
    return single_match(evaluator, xpath, context) is not None


def is_unique_id(value: str, scope: Document | ShadowRoot) -> bool:
    if not value:
        return False
    count = 0
    for element in scope.iter_descendants():
        if element.attributes.get("id") == value:
            count += 1
            if count > 1:
                return False
    return count == 1


def dedupe_and_validate(
    candidates: Iterable[Candidate],
    evaluator: XPathEvaluator,
    context: EvaluationContext,
    *,
    expected: Element | None = None,
) -> list[Candidate]:
    """Drop repeated selectors and every selector that does not match exactly once.

    With ``expected`` set, the single match must also be that element.
    """
    validated: list[Candidate] = []
    seen: set[str] = set()
    for candidate in candidates:
        if not candidate.selector or candidate.selector in seen:
            continue
        match = single_match(evaluator, candidate.selector, context)
        if match is None:
            continue
        if expected is not None and match is not expected:
            logger.debug("%r is unique but selects another element", candidate.selector)
            continue
        seen.add(candidate.selector)
        validated.append(candidate)
    return validated
