from __future__ import annotations

import re
from typing import Iterator, Literal, Mapping, Union

HTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
SVG_NAMESPACE = "http://www.w3.org/2000/svg"
MATHML_NAMESPACE = "http://www.w3.org/1998/Math/MathML"

DEFAULT_NAMESPACES = frozenset({None, "", HTML_NAMESPACE})

# ASCII subset of XML NCName; anything else (`o:p`, non-ASCII custom elements)
# is only addressable through local-name().
_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

ShadowRootMode = Literal["open", "closed"]


class _ParentNode:
    """Shared child bookkeeping for elements, documents and shadow roots."""

    def __init__(self) -> None:
        self._nodes: list[Element | str] = []

    @property
    def child_nodes(self) -> tuple[Element | str, ...]:
        return tuple(self._nodes)

    @property
    def children(self) -> list[Element]:
        return [node for node in self._nodes if isinstance(node, Element)]

    def append(self, node: Element | str) -> Element | str:
        if isinstance(node, str):
            self.append_text(node)
            return node
        if node.parent is not None:
            raise ValueError(f"<{node.local_name}> already has a parent")
        node.parent = self
        self._nodes.append(node)
        return node

    def append_text(self, text: str) -> None:
        if not text:
            return
        if self._nodes and isinstance(self._nodes[-1], str):
            self._nodes[-1] += text
        else:
            self._nodes.append(text)

    def iter_descendants(self) -> Iterator[Element]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    @property
    def text_content(self) -> str:
        pieces: list[str] = []
        for node in self._nodes:
            if isinstance(node, str):
                pieces.append(node)
            else:
                pieces.append(node.text_content)
        return "".join(pieces)


class Element(_ParentNode):
    """Read-only (from the generator's point of view) markup element."""

    def __init__(
        self,
        local_name: str,
        attributes: Mapping[str, str] | None = None,
        *,
        namespace: str | None = None,
    ) -> None:
        super().__init__()
        if not local_name:
            raise ValueError("local_name must not be empty")
        self.local_name = local_name
        self.namespace = namespace
        self.attributes: dict[str, str] = dict(attributes or {})
        self.parent: ParentNode | None = None
        self._shadow_root: ShadowRoot | None = None

    def __repr__(self) -> str:
        return f"<Element {self.local_name} attrs={self.attributes!r}>"

    @property
    def tag_name(self) -> str:
        return self.local_name.lower()

    @property
    def in_default_namespace(self) -> bool:
        return self.namespace in DEFAULT_NAMESPACES

    @property
    def has_xml_name(self) -> bool:
        return bool(_XML_NAME.match(self.local_name))

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def class_list(self) -> list[str]:
        raw = self.attributes.get("class", "")
        seen: set[str] = set()
        tokens: list[str] = []
        for token in raw.split():
            if token in seen:
                continue
            seen.add(token)
            tokens.append(token)
        return tokens

    @property
    def parent_element(self) -> Element | None:
        return self.parent if isinstance(self.parent, Element) else None

    @property
    def root_node(self) -> ParentNode:
        node: ParentNode = self
        while isinstance(node, Element) and node.parent is not None:
            node = node.parent
        return node

    @property
    def owner_document(self) -> Document | None:
        root = self.root_node
        while isinstance(root, ShadowRoot):
            root = root.host.root_node
        return root if isinstance(root, Document) else None

    def _siblings(self) -> list[Element]:
        if self.parent is None:
            return [self]
        return self.parent.children

    @property
    def previous_element_sibling(self) -> Element | None:
        siblings = self._siblings()
        index = siblings.index(self)
        return siblings[index - 1] if index > 0 else None

    @property
    def next_element_sibling(self) -> Element | None:
        siblings = self._siblings()
        index = siblings.index(self)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    @property
    def hosts_shadow_root(self) -> bool:
        return self._shadow_root is not None

    def attach_shadow(self, mode: ShadowRootMode = "open") -> ShadowRoot:
        if self._shadow_root is not None:
            raise ValueError(f"<{self.local_name}> already hosts a shadow root")
        self._shadow_root = ShadowRoot(host=self, mode=mode)
        return self._shadow_root

    @property
    def shadow_root(self) -> ShadowRoot | None:
        """The attached shadow root, hidden when it was attached in closed mode."""
        root = self._shadow_root
        if root is None or root.mode == "closed":
            return None
        return root


class Document(_ParentNode):
    def __init__(self) -> None:
        super().__init__()

    def __repr__(self) -> str:
        root = self.document_element
        return f"<Document root={root.local_name if root else None}>"

    def append(self, node: Element | str) -> Element | str:
        if isinstance(node, Element) and self.children:
            raise ValueError("a document holds exactly one document element")
        return super().append(node)

    @property
    def document_element(self) -> Element | None:
        children = self.children
        return children[0] if children else None

    @property
    def body(self) -> Element | None:
        for element in self.iter_descendants():
            if element.tag_name == "body" and element.in_default_namespace:
                return element
        return None

    def get_element_by_id(self, value: str) -> Element | None:
        for element in self.iter_descendants():
            if element.attributes.get("id") == value:
                return element
        return None


class ShadowRoot(_ParentNode):
    """Encapsulated tree attached to a host; it has no parent link."""

    def __init__(self, host: Element, mode: ShadowRootMode = "open") -> None:
        super().__init__()
        if mode not in ("open", "closed"):
            raise ValueError(f"unsupported shadow root mode: {mode!r}")
        self.host = host
        self.mode: ShadowRootMode = mode

    def __repr__(self) -> str:
        return f"<ShadowRoot host={self.host.local_name} mode={self.mode}>"


ParentNode = Union[Element, Document, ShadowRoot]
TreeScope = Union[Document, ShadowRoot]
