import pytest

from anchorxpath import generate_xpath, resolve_selector, resolve_selector_or_raise
from anchorxpath.dom import Document, Element
from anchorxpath.errors import ShadowUnavailableError
from anchorxpath.html_loader import parse_html
from anchorxpath.shadow import shadow_absolute_path, split_at_shadow_boundaries


def _product_card(mode: str = "open") -> tuple[Document, Element, Element]:
    document = parse_html("<html><body><my-product></my-product></body></html>")
    host = document.body.children[0]
    shadow_root = host.attach_shadow(mode)
    section = shadow_root.append(Element("section"))
    section.append(Element("header"))
    wrapper = section.append(Element("div"))
    title = wrapper.append(Element("span", {"class": "title"}))
    title.append("Acme Widget")
    return document, host, title


def test_shadow_path_from_root_to_element() -> None:
    _, host, title = _product_card()
    assert shadow_absolute_path(host.shadow_root, title) == "/section[1]/div[1]/span[1]"


def test_split_returns_outermost_host_and_paths() -> None:
    _, host, title = _product_card()

    outer, paths = split_at_shadow_boundaries(title)

    assert outer is host
    assert paths == ["/section[1]/div[1]/span[1]"]
    assert split_at_shadow_boundaries(host) == (host, [])


def test_compound_selector_for_shadow_element() -> None:
    document, _, title = _product_card()

    selector = generate_xpath(title)

    assert selector == "//body/my-product[1]|/section[1]/div[1]/span[1]"
    assert resolve_selector(document, selector) is title


def test_nested_shadow_roots_are_ordered_outermost_first() -> None:
    document, _, title = _product_card()
    rating = title.parent_element.append(Element("x-rating"))
    inner_root = rating.attach_shadow()
    inner_root.append(Element("i"))
    star = inner_root.append(Element("i", {"class": "star"}))

    selector = generate_xpath(star)

    assert selector == "//body/my-product[1]|/section[1]/div[1]/x-rating[1]|/i[2]"
    assert resolve_selector(document, selector) is star


def test_closed_shadow_root_is_not_resolvable() -> None:
    document, _, title = _product_card(mode="closed")

    selector = generate_xpath(title)

    assert selector == "//body/my-product[1]|/section[1]/div[1]/span[1]"
    assert resolve_selector(document, selector) is None
    with pytest.raises(ShadowUnavailableError):
        resolve_selector_or_raise(document, selector)


def test_declarative_shadow_root_from_markup() -> None:
    document = parse_html(
        "<html><body><main>"
        "<my-product id='card'><template shadowrootmode='open'>"
        "<section><div><span>Acme Widget</span></div></section>"
        "</template></my-product>"
        "</main></body></html>"
    )
    host = document.get_element_by_id("card")
    title = host.shadow_root.children[0].children[0].children[0]

    selector = generate_xpath(title)

    assert selector == "//*[@id='card']|/section[1]/div[1]/span[1]"
    assert resolve_selector(document, selector) is title


def test_dotted_custom_element_names_inside_shadow_roots() -> None:
    document = parse_html("<html><body><x-host></x-host></body></html>")
    host = document.body.children[0]
    wrapper = host.attach_shadow().append(Element("div"))
    widget = wrapper.append(Element("my-el.v2"))

    selector = generate_xpath(widget)

    assert selector == "//body/x-host[1]|/div[1]/my-el.v2[1]"
    assert resolve_selector(document, selector) is widget
