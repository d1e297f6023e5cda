from __future__ import annotations

from .dom import Element, ParentNode, ShadowRoot

COMPOUND_SEPARATOR = "|"


def shadow_sibling_index(element: Element, parent: ParentNode) -> int:
    """1-based index among the parent's children sharing the element's local name."""
    tag = element.local_name.lower()
    index = 0
    for child in parent.children:
        if child.local_name.lower() == tag:
            index += 1
        if child is element:
            return index
    return 1


def shadow_absolute_path(shadow_root: ShadowRoot, element: Element) -> str:
    """Deterministic ``/tag[i]/...`` path from ``shadow_root`` down to ``element``."""
    segments: list[str] = []
    current = element
    while True:
        parent = current.parent
        if parent is None:
            break
        segments.insert(0, f"{current.local_name.lower()}[{shadow_sibling_index(current, parent)}]")
        if parent is shadow_root or not isinstance(parent, Element):
            break
        current = parent
    return "/" + "/".join(segments)


def split_at_shadow_boundaries(element: Element) -> tuple[Element, list[str]]:
    """Walk shadow hosts outward.

    Returns the outermost document-scoped host (or the element itself) and the
    shadow paths ordered outermost first.
    """
    shadow_paths: list[str] = []
    current = element
    while True:
        root = current.root_node
        if not isinstance(root, ShadowRoot):
            break
        shadow_paths.insert(0, shadow_absolute_path(root, current))
        current = root.host
    return current, shadow_paths


def join_compound_selector(document_selector: str, shadow_paths: list[str]) -> str:
    if not shadow_paths:
        return document_selector
    return COMPOUND_SEPARATOR.join([document_selector, *shadow_paths])
