from __future__ import annotations

import logging
import re

from .dom import Document, Element, ParentNode, ShadowRoot
from .errors import EvaluationError, SelectorResolutionError, ShadowUnavailableError
from .evaluator import EvaluationContext, LxmlXPathEvaluator, XPathEvaluator
from .shadow import COMPOUND_SEPARATOR

logger = logging.getLogger(__name__)

_SHADOW_STEP = re.compile(r"^([^\[\]/|]+|\*)\[(\d+)\]$")


def resolve_selector(
    document: Document,
    selector: str,
    *,
    evaluator: XPathEvaluator | None = None,
) -> Element | None:
    """Resolve a plain or shadow-compound selector; ``None`` when nothing matches."""
    try:
        return resolve_selector_or_raise(document, selector, evaluator=evaluator)
    except SelectorResolutionError as exc:
        logger.debug("Selector %r did not resolve: %s", selector, exc)
        return None


def resolve_selector_or_raise(
    document: Document,
    selector: str,
    *,
    evaluator: XPathEvaluator | None = None,
) -> Element:
    parts = [part.strip() for part in str(selector or "").split(COMPOUND_SEPARATOR)]
    if not parts[0]:
        raise SelectorResolutionError("Selector is empty.")

    active = evaluator if evaluator is not None else LxmlXPathEvaluator()
    current = _first_match(active, parts[0], document)

    for segment in parts[1:]:
        root = current.shadow_root
        if root is None:
            raise ShadowUnavailableError(
                f"<{current.local_name}> exposes no open shadow root for segment {segment!r}."
            )
        if segment.startswith("/"):
            current = resolve_in_shadow_root(root, segment)
        else:
            current = _first_match(active, segment, root)
    return current


def resolve_in_shadow_root(root: ShadowRoot, path: str) -> Element:
    """Walk ``/tag[i]/tag[j]`` steps from the shadow root, matching local names."""
    steps = [step.strip() for step in path.split("/") if step.strip()]
    if not steps:
        raise SelectorResolutionError(f"Shadow path {path!r} has no steps.")

    parent: ParentNode = root
    current: Element | None = None
    for step in steps:
        match = _SHADOW_STEP.match(step)
        if not match:
            raise SelectorResolutionError(f"Unsupported shadow step {step!r}.")
        tag = match.group(1).lower()
        index = int(match.group(2))
        if index < 1:
            raise SelectorResolutionError(f"Shadow step {step!r} must use a 1-based index.")

        children = parent.children
        if tag != "*":
            children = [child for child in children if child.local_name.lower() == tag]
        if index > len(children):
            raise SelectorResolutionError(f"Shadow step {step!r} matched nothing.")
        current = children[index - 1]
        parent = current
    return current  # type: ignore[return-value]


def _first_match(evaluator: XPathEvaluator, xpath: str, context: EvaluationContext) -> Element:
    try:
        matches = evaluator.evaluate(xpath, context)
    except EvaluationError as exc:
        raise SelectorResolutionError(str(exc)) from exc
    if not matches:
        raise SelectorResolutionError(f"{xpath!r} matched nothing.")
    return matches[0]
