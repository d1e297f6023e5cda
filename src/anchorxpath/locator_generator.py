from __future__ import annotations

import logging

from .dom import Document, Element, ShadowRoot
from .evaluator import XPathEvaluator
from .models import Candidate, GeneratorSettings, StableAttribute
from .scoring import strategy_score
from .selector_rules import has_stable_text, is_stable_id, normalize_space, stable_classes
from .validation import is_unique, is_unique_id
from .xpath_utils import (
    absolute_path,
    attribute_xpath,
    class_predicate,
    id_xpath,
    indexed_step,
    matches_node_test,
    node_test,
    text_xpath,
    xpath_literal,
)

logger = logging.getLogger(__name__)


def element_text(element: Element) -> str:
    return element.text_content.strip()


def is_body(element: Element) -> bool:
    return element.tag_name == "body" and element.in_default_namespace


class CandidateFactory:
    """Runs every strategy against one element and collects raw candidates.

    Strategies only propose selectors; confidence comes from the strategy name
    and uniqueness is re-checked later by ``dedupe_and_validate``.
    """

    def __init__(
        self,
        element: Element,
        evaluator: XPathEvaluator,
        settings: GeneratorSettings | None = None,
    ) -> None:
        scope = element.root_node
        if not isinstance(scope, (Document, ShadowRoot)):
            raise ValueError(f"<{element.local_name}> is not attached to a document")
        self.element = element
        self.scope: Document | ShadowRoot = scope
        self.evaluator = evaluator
        self.settings = settings or GeneratorSettings()
        self._candidates: list[Candidate] = []

    def generate(self) -> list[Candidate]:
        self._add_unique_tag_strategy()
        self._add_stable_id_strategy()
        self._add_direct_strategies()
        self._add_ancestor_strategy()
        self._add_sibling_strategy()
        self._add_class_strategy()
        self._add_absolute_strategy()
        logger.debug("Collected %d raw candidates for <%s>", len(self._candidates), self.element.local_name)
        return list(self._candidates)

    def _emit(self, strategy: str, selector: str | None) -> None:
        if not selector:
            return
        self._candidates.append(Candidate(selector=selector, score=strategy_score(strategy), strategy=strategy))

    def _is_unique(self, xpath: str) -> bool:
        return is_unique(self.evaluator, xpath, self.scope)

    def _add_unique_tag_strategy(self) -> None:
        self._emit("unique_tag", self.unique_tag_selector(self.element))

    def _add_stable_id_strategy(self) -> None:
        self._emit("stable_id", self.stable_id_selector(self.element))

    def _add_direct_strategies(self) -> None:
        attribute = self.unique_stable_attribute(self.element)
        if attribute is not None:
            self._emit("stable_attr", attribute_xpath(self.element, attribute.name, attribute.value))
        self._emit("label_anchor", self.label_anchored_path(self.element))
        self._emit("text_anchor", self.stable_text_selector(self.element))

    def _add_ancestor_strategy(self) -> None:
        for selector in self.ancestor_paths(self.element):
            self._emit("ancestor", selector)

    def _add_sibling_strategy(self) -> None:
        for selector in self.sibling_paths(self.element):
            self._emit("sibling", selector)

    def _add_class_strategy(self) -> None:
        for selector in self.class_selectors(self.element):
            self._emit("class", selector)

    def _add_absolute_strategy(self) -> None:
        path = absolute_path(self.element)
        if self._is_unique(path):
            self._emit("absolute", path)

    # Single-element anchors, shared by the target and its neighbours.

    def unique_tag_selector(self, element: Element, *, whitelist_only: bool = True) -> str | None:
        if whitelist_only and element.tag_name not in self.settings.unique_tags:
            return None
        xpath = f"//{node_test(element)}"
        return xpath if self._is_unique(xpath) else None

    def stable_id_selector(self, element: Element) -> str | None:
        value = element.id
        if not is_stable_id(value) or not is_unique_id(value, self.scope):
            return None
        return id_xpath(value)

    def unique_stable_attribute(self, element: Element) -> StableAttribute | None:
        for name in self.settings.stable_attributes:
            value = element.get_attribute(name)
            if not value or not is_stable_id(value):
                continue
            if self._is_unique(attribute_xpath(element, name, value)):
                return StableAttribute(name=name, value=value)
        return None

    def stable_text_selector(self, element: Element) -> str | None:
        text = element_text(element)
        if not has_stable_text(text):
            return None
        xpath = text_xpath(element, normalize_space(text))
        return xpath if self._is_unique(xpath) else None

    def stable_class_selector(self, element: Element) -> str | None:
        classes = stable_classes(element.class_list)
        if not classes:
            return None
        xpath = f"//{node_test(element)}[{class_predicate(classes)}]"
        return xpath if self._is_unique(xpath) else None

    def label_anchored_path(self, element: Element) -> str | None:
        label = element.previous_element_sibling
        if label is None:
            return None
        text = element_text(label)
        if not self.settings.min_label_length <= len(text) <= self.settings.max_label_length:
            return None
        if not has_stable_text(_strip_label_punctuation(text)):
            return None

        label_xpath = f"//{node_test(label)}[normalize-space(text())={xpath_literal(normalize_space(text))}]"
        if not self._is_unique(label_xpath):
            return None
        return f"{label_xpath}/following-sibling::{node_test(element)}[1]"

    def anchor_xpaths(self, element: Element) -> list[str]:
        anchors: list[str] = []
        for selector in (
            self.unique_tag_selector(element, whitelist_only=False),
            self.stable_id_selector(element),
            self._stable_attribute_xpath(element),
            self.stable_text_selector(element),
            self.stable_class_selector(element),
        ):
            if selector:
                anchors.append(selector)
        return anchors

    def sibling_anchor(self, sibling: Element) -> str | None:
        return (
            self.unique_tag_selector(sibling, whitelist_only=False)
            or self.stable_id_selector(sibling)
            or self._stable_attribute_xpath(sibling)
            or self.stable_text_selector(sibling)
        )

    def _stable_attribute_xpath(self, element: Element) -> str | None:
        attribute = self.unique_stable_attribute(element)
        if attribute is None:
            return None
        return attribute_xpath(element, attribute.name, attribute.value)

    # Multi-selector strategies.

    def ancestor_paths(self, element: Element) -> list[str]:
        selectors: list[str] = []
        steps: list[str] = []
        current = element
        depth = 0
        while current.parent_element is not None and depth < self.settings.max_ancestor_depth:
            depth += 1
            parent = current.parent_element
            steps.insert(0, indexed_step(current))
            relative = "/".join(steps)
            for anchor in self.anchor_xpaths(parent):
                selectors.append(f"{anchor}/{relative}")
            if is_body(parent):
                break
            current = parent
        return selectors

    def sibling_paths(self, element: Element) -> list[str]:
        """Nearest anchor-worthy sibling on each side, addressed through a sibling axis."""
        parent = element.parent
        if parent is None:
            return []
        siblings = parent.children
        position = siblings.index(element)
        target_test = node_test(element)
        selectors: list[str] = []

        for index in range(position - 1, -1, -1):
            anchor = self.sibling_anchor(siblings[index])
            if anchor is None:
                continue
            count = _count_matching_between(siblings, index, position, element)
            selectors.append(f"{anchor}/following-sibling::{target_test}[{count}]")
            break

        for index in range(position + 1, len(siblings)):
            anchor = self.sibling_anchor(siblings[index])
            if anchor is None:
                continue
            count = _count_matching_between(siblings, position, index, element)
            selectors.append(f"{anchor}/preceding-sibling::{target_test}[{count}]")
            break

        return selectors

    def class_selectors(self, element: Element) -> list[str]:
        classes = stable_classes(element.class_list)
        if not classes:
            return []
        test = node_test(element)
        selectors: list[str] = []
        combined = f"//{test}[{class_predicate(classes)}]"
        if self._is_unique(combined):
            selectors.append(combined)
        for token in classes:
            single = f"//{test}[{class_predicate([token])}]"
            if self._is_unique(single):
                selectors.append(single)
        return selectors


def _strip_label_punctuation(text: str) -> str:
    # "Price:" labels its value the same way "Price" does.
    return text[:-1].rstrip() if text.endswith(":") else text


def _count_matching_between(siblings: list[Element], start: int, end: int, element: Element) -> int:
    """Axis position of the target seen from the anchor: itself plus matching siblings in between."""
    low, high = min(start, end), max(start, end)
    between = sum(1 for sibling in siblings[low + 1 : high] if matches_node_test(sibling, element))
    return between + 1
