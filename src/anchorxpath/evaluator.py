from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Protocol, Union

from lxml import etree

from .dom import Document, Element, ParentNode, ShadowRoot, TreeScope
from .errors import EvaluationError
from .xpath_utils import step_name, xpath_literal

logger = logging.getLogger(__name__)

SHADOW_WRAPPER_TAG = "anchorxpath-shadow-root"
OPAQUE_NAME_NAMESPACE = "urn:anchorxpath:opaque-name"

_XML_UNSAFE_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

EvaluationContext = Union[Document, ShadowRoot, Element]


class XPathEvaluator(Protocol):
    """Path-query capability supplied by the host.

    ``evaluate`` returns every element the query selects, in document order,
    with ``context`` as the context node. Anything the engine cannot evaluate
    must be reported as :class:`EvaluationError`.
    """

    def evaluate(self, query: str, context: EvaluationContext) -> list[Element]:
        ...


@dataclass(slots=True)
class _ScopeMirror:
    scope: TreeScope
    root: etree._Element
    tree: etree._ElementTree | None = None
    to_model: dict[etree._Element, Element] = field(default_factory=dict)
    from_model: dict[Element, etree._Element] = field(default_factory=dict)
    opaque_names: dict[str, str] = field(default_factory=dict)

    def context_node(self, context: EvaluationContext) -> etree._Element | etree._ElementTree:
        if isinstance(context, Element):
            return self.from_model[context]
        if self.tree is not None:
            return self.tree
        return self.root

    def rewrite(self, query: str) -> str:
        # `local-name()='o:p'` has to find the placeholder standing in for `o:p`.
        for name, placeholder in self.opaque_names.items():
            query = query.replace(
                f"local-name()={xpath_literal(name)}",
                f"(local-name()={xpath_literal(placeholder)}"
                f" and namespace-uri()={xpath_literal(OPAQUE_NAME_NAMESPACE)})",
            )
        return query


def tree_scope_of(context: EvaluationContext) -> TreeScope:
    if isinstance(context, (Document, ShadowRoot)):
        return context
    root = context.root_node
    if isinstance(root, (Document, ShadowRoot)):
        return root
    raise EvaluationError(f"<{context.local_name}>", "element is not attached to a document or shadow root")


def _xml_safe(text: str) -> str:
    return _XML_UNSAFE_CHARS.sub("", text)


def _mirror_name(opaque_names: dict[str, str], element: Element) -> str:
    """lxml tag for ``element``; names lxml rejects get a placeholder in a private namespace."""
    if not element.has_xml_name:
        name = step_name(element)
        placeholder = opaque_names.setdefault(name, "n" + name.encode("utf-8", "surrogatepass").hex())
        return f"{{{OPAQUE_NAME_NAMESPACE}}}{placeholder}"
    if element.in_default_namespace:
        return element.tag_name
    return f"{{{element.namespace}}}{element.local_name}"


class LxmlXPathEvaluator:
    """XPath 1.0 evaluator backed by an lxml mirror of each tree scope.

    Default-namespace elements are mirrored unqualified and every other element
    keeps its namespace, so ``//path`` misses SVG paths exactly as it does in a
    browser while ``//*[local-name()='path']`` finds them. Elements whose names
    lxml rejects (``o:p``) are mirrored under placeholders, and the
    ``local-name()='o:p'`` tests that ``node_test`` emits for them are rewritten
    to match those placeholders. Mirrors are built on first use and reused until
    :meth:`invalidate` is called.
    """

    def __init__(self) -> None:
        self._mirrors: dict[TreeScope, _ScopeMirror] = {}

    def invalidate(self) -> None:
        self._mirrors.clear()

    def evaluate(self, query: str, context: EvaluationContext) -> list[Element]:
        scope = tree_scope_of(context)
        mirror = self._mirror(scope, query)
        target = mirror.context_node(context)
        try:
            result = target.xpath(mirror.rewrite(query))
        except etree.XPathError as exc:
            raise EvaluationError(query, str(exc)) from exc

        if not isinstance(result, list):
            raise EvaluationError(query, "query does not select nodes")

        matches: list[Element] = []
        for item in result:
            if not isinstance(item, etree._Element):
                raise EvaluationError(query, "query selects non-element nodes")
            model = mirror.to_model.get(item)
            if model is None:
                # synthetic shadow wrapper
                continue
            matches.append(model)
        return matches

    def _mirror(self, scope: TreeScope, query: str) -> _ScopeMirror:
        mirror = self._mirrors.get(scope)
        if mirror is None:
            try:
                mirror = _build_mirror(scope)
            except ValueError as exc:
                raise EvaluationError(query, f"tree cannot be mirrored: {exc}") from exc
            self._mirrors[scope] = mirror
        return mirror


def _build_mirror(scope: TreeScope) -> _ScopeMirror:
    if isinstance(scope, Document):
        document_element = scope.document_element
        if document_element is None:
            raise ValueError("document has no document element")
        opaque_names: dict[str, str] = {}
        root = etree.Element(_mirror_name(opaque_names, document_element))
        mirror = _ScopeMirror(scope=scope, root=root, tree=etree.ElementTree(root), opaque_names=opaque_names)
        _register(mirror, document_element, root)
        _mirror_children(mirror, document_element, root)
    else:
        root = etree.Element(SHADOW_WRAPPER_TAG)
        mirror = _ScopeMirror(scope=scope, root=root)
        _mirror_children(mirror, scope, root)
    logger.debug("Mirrored %r with %d elements", scope, len(mirror.to_model))
    return mirror


def _register(mirror: _ScopeMirror, model: Element, node: etree._Element) -> None:
    for name, value in model.attributes.items():
        try:
            node.set(name, _xml_safe(value))
        except ValueError:
            logger.debug("Attribute %r on <%s> has no XPath-addressable form", name, model.local_name)
    mirror.to_model[node] = model
    mirror.from_model[model] = node


def _mirror_children(mirror: _ScopeMirror, parent: ParentNode, parent_node: etree._Element) -> None:
    last: etree._Element | None = None
    for child in parent.child_nodes:
        if isinstance(child, str):
            text = _xml_safe(child)
            if last is None:
                parent_node.text = (parent_node.text or "") + text
            else:
                last.tail = (last.tail or "") + text
            continue
        node = etree.SubElement(parent_node, _mirror_name(mirror.opaque_names, child))
        _register(mirror, child, node)
        _mirror_children(mirror, child, node)
        last = node
