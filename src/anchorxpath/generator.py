from __future__ import annotations

import logging

from .dom import Document, Element
from .errors import InvalidInputError
from .evaluator import LxmlXPathEvaluator, XPathEvaluator
from .locator_generator import CandidateFactory
from .models import Candidate, GeneratorSettings
from .scoring import rank_candidates
from .shadow import COMPOUND_SEPARATOR, join_compound_selector, split_at_shadow_boundaries
from .validation import dedupe_and_validate
from .xpath_utils import absolute_path

logger = logging.getLogger(__name__)


def generate_xpath(
    element: Element,
    *,
    evaluator: XPathEvaluator | None = None,
    settings: GeneratorSettings | None = None,
) -> str:
    """Build a reusable selector for ``element``.

    Document-scoped elements get a plain XPath. Elements inside shadow trees
    get ``docXPath|/tag[i]/...|...``: the best selector for the outermost host
    followed by one deterministic path per shadow boundary, outermost first.
    """
    if element is None or not isinstance(element, Element):
        raise InvalidInputError("Invalid input: expected an Element.")

    active = evaluator if evaluator is not None else LxmlXPathEvaluator()
    host, shadow_paths = split_at_shadow_boundaries(element)
    if shadow_paths:
        logger.debug("Crossed %d shadow boundaries for <%s>", len(shadow_paths), element.local_name)

    base = generate_document_xpath(host, evaluator=active, settings=settings)
    return join_compound_selector(base, shadow_paths)


def generate_candidates(
    element: Element,
    *,
    evaluator: XPathEvaluator | None = None,
    settings: GeneratorSettings | None = None,
) -> list[Candidate]:
    """Validated, ranked candidates for a document-scoped element, best first."""
    if element is None or not isinstance(element, Element):
        raise InvalidInputError("Invalid input: expected an Element.")
    if not isinstance(element.root_node, Document):
        return []

    active = evaluator if evaluator is not None else LxmlXPathEvaluator()
    factory = CandidateFactory(element, active, settings)
    raw = [
        candidate
        for candidate in factory.generate()
        # the separator would be read back as a shadow boundary
        if COMPOUND_SEPARATOR not in candidate.selector
    ]
    validated = dedupe_and_validate(raw, active, factory.scope, expected=element)
    logger.debug("%d of %d candidates validated for <%s>", len(validated), len(raw), element.local_name)
    return rank_candidates(validated)


def generate_document_xpath(
    element: Element,
    *,
    evaluator: XPathEvaluator | None = None,
    settings: GeneratorSettings | None = None,
) -> str:
    ranked = generate_candidates(element, evaluator=evaluator, settings=settings)
    if not ranked:
        logger.debug("No validated candidate for <%s>; using absolute path", element.local_name)
        return absolute_path(element)
    best = ranked[0]
    logger.debug("Selected %s candidate %r (score %d)", best.strategy, best.selector, best.score)
    return best.selector
