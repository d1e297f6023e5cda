from __future__ import annotations

from .dom import Element


def node_test(element: Element) -> str:
    """Node test for one path step.

    Elements outside the default namespace (SVG, MathML) are addressed through
    ``local-name()`` because an unprefixed name test never matches them under
    the evaluator's default namespace binding. Names that are not XML names
    (``o:p``) cannot appear in a name test at all and take the same route.
    """
    if uses_local_name_test(element):
        return f"*[local-name()={xpath_literal(step_name(element))}]"
    return element.tag_name


def uses_local_name_test(element: Element) -> bool:
    return not (element.in_default_namespace and element.has_xml_name)


def step_name(element: Element) -> str:
    return element.tag_name if element.in_default_namespace else element.local_name


def matches_node_test(candidate: Element, element: Element) -> bool:
    """Whether ``candidate`` is selected by ``element``'s node test."""
    if uses_local_name_test(element):
        return step_name(candidate) == step_name(element)
    return candidate.in_default_namespace and candidate.tag_name == element.tag_name


def element_index(element: Element) -> int:
    """1-based position among preceding siblings matched by the same node test."""
    index = 1
    sibling = element.previous_element_sibling
    while sibling is not None:
        if matches_node_test(sibling, element):
            index += 1
        sibling = sibling.previous_element_sibling
    return index


def indexed_step(element: Element) -> str:
    return f"{node_test(element)}[{element_index(element)}]"


def absolute_path(element: Element) -> str:
    """Root-to-element path; unique by construction within the element's scope."""
    steps: list[str] = []
    current: Element | None = element
    while current is not None:
        steps.append(indexed_step(current))
        current = current.parent_element
    steps.reverse()
    return "/" + "/".join(steps)


def count_xpath_steps(xpath: str) -> int:
    return len([segment for segment in xpath.split("/") if segment])


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    quoted = [f"'{piece}'" for piece in pieces]
    return "concat(" + ", \"'\", ".join(quoted) + ")"


def attribute_xpath(element: Element, name: str, value: str) -> str:
    return f"//{node_test(element)}[@{name}={xpath_literal(value)}]"


def id_xpath(value: str) -> str:
    return f"//*[@id={xpath_literal(value)}]"


def text_xpath(element: Element, text: str) -> str:
    return f"//{node_test(element)}[normalize-space(.)={xpath_literal(text)}]"


def class_predicate(classes: list[str]) -> str:
    return " and ".join(f"contains(@class, {xpath_literal(token)})" for token in classes)
