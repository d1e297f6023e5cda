from __future__ import annotations

import logging

from lxml import etree
from lxml import html as lxml_html

from .dom import MATHML_NAMESPACE, SVG_NAMESPACE, Document, Element, ParentNode

logger = logging.getLogger(__name__)

SHADOW_ROOT_ATTRIBUTES = ("shadowrootmode", "shadowroot")

# libxml2 lowercases every tag; restore the SVG names browsers keep camel-cased.
SVG_TAG_CASE: dict[str, str] = {
    name.lower(): name
    for name in (
        "altGlyph",
        "animateMotion",
        "animateTransform",
        "clipPath",
        "feBlend",
        "feColorMatrix",
        "feComposite",
        "feDropShadow",
        "feFlood",
        "feGaussianBlur",
        "feImage",
        "feMerge",
        "feMergeNode",
        "feMorphology",
        "feOffset",
        "feTurbulence",
        "foreignObject",
        "linearGradient",
        "radialGradient",
        "textPath",
    )
}

_FOREIGN_ROOTS = {"svg": SVG_NAMESPACE, "math": MATHML_NAMESPACE}


def parse_html(markup: str | bytes) -> Document:
    """Parse an HTML page into the read-only tree model.

    Comments are dropped, elements under ``<svg>``/``<math>`` get their
    namespaces, and ``<template shadowrootmode=...>`` becomes the parent's
    shadow root (declarative shadow DOM).
    """
    root = lxml_html.document_fromstring(markup)
    document = Document()
    document.append(_convert(root, None))
    return document


def _namespace_for(tag: str, parent_namespace: str | None) -> str | None:
    if parent_namespace == SVG_NAMESPACE:
        return SVG_NAMESPACE
    if parent_namespace == MATHML_NAMESPACE:
        return MATHML_NAMESPACE
    return _FOREIGN_ROOTS.get(tag)


def _child_namespace(element: Element) -> str | None:
    # foreignObject content is HTML again.
    if element.namespace == SVG_NAMESPACE and element.local_name == "foreignObject":
        return None
    return element.namespace


def _convert(node: etree._Element, parent_namespace: str | None) -> Element:
    tag = str(node.tag).lower()
    namespace = _namespace_for(tag, parent_namespace)
    local_name = SVG_TAG_CASE.get(tag, tag) if namespace == SVG_NAMESPACE else tag
    element = Element(local_name, dict(node.attrib), namespace=namespace)
    _convert_children(node, element, _child_namespace(element))
    return element


def _shadow_mode(node: etree._Element) -> str | None:
    if str(node.tag).lower() != "template":
        return None
    for attribute in SHADOW_ROOT_ATTRIBUTES:
        mode = (node.get(attribute) or "").strip().lower()
        if mode in ("open", "closed"):
            return mode
    return None


def _convert_children(node: etree._Element, target: ParentNode, namespace: str | None) -> None:
    target.append_text(node.text or "")
    for child in node:
        if isinstance(child.tag, str):
            mode = _shadow_mode(child)
            if mode is not None and isinstance(target, Element) and not target.hosts_shadow_root:
                shadow_root = target.attach_shadow(mode)  # type: ignore[arg-type]
                _convert_children(child, shadow_root, namespace)
                logger.debug("Attached %s shadow root to <%s>", mode, target.local_name)
            else:
                target.append(_convert(child, namespace))
        target.append_text(child.tail or "")
