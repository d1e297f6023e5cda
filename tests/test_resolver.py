import pytest

from anchorxpath.dom import Element
from anchorxpath.errors import SelectorResolutionError, ShadowUnavailableError
from anchorxpath.html_loader import parse_html
from anchorxpath.resolver import resolve_in_shadow_root, resolve_selector, resolve_selector_or_raise

PAGE = (
    "<html><body>"
    "<ul><li>One</li><li>Two</li></ul>"
    "<x-menu id='menu'></x-menu>"
    "</body></html>"
)


def _page_with_menu():
    document = parse_html(PAGE)
    host = document.get_element_by_id("menu")
    shadow_root = host.attach_shadow()
    nav = shadow_root.append(Element("nav"))
    first = nav.append(Element("a", {"class": "item"}))
    second = nav.append(Element("a", {"class": "item active"}))
    return document, host, nav, first, second


def test_plain_selector_returns_first_match() -> None:
    document = parse_html(PAGE)

    assert resolve_selector(document, "//li").text_content == "One"
    assert resolve_selector(document, "//ul/li[2]").text_content == "Two"


def test_unmatched_or_empty_selectors_return_none() -> None:
    document = parse_html(PAGE)

    assert resolve_selector(document, "//table") is None
    assert resolve_selector(document, "") is None
    assert resolve_selector(document, "//li[") is None


def test_shadow_path_segment_walks_local_names() -> None:
    document, _, _, _, second = _page_with_menu()

    assert resolve_selector(document, "//*[@id='menu']|/nav[1]/a[2]") is second
    assert resolve_selector(document, " //*[@id='menu'] | /NAV[1]/A[2] ") is second
    assert resolve_selector(document, "//*[@id='menu']|/nav[1]/*[1]").get_attribute("class") == "item"


def test_relative_segment_is_evaluated_inside_the_shadow_root() -> None:
    document, _, _, _, second = _page_with_menu()

    assert resolve_selector(document, "//*[@id='menu']|.//a[contains(@class, 'active')]") is second
    assert resolve_selector(document, "//*[@id='menu']|.//li") is None


def test_resolve_in_shadow_root_rejects_bad_steps() -> None:
    _, host, _, _, _ = _page_with_menu()
    root = host.shadow_root

    with pytest.raises(SelectorResolutionError):
        resolve_in_shadow_root(root, "/nav")
    with pytest.raises(SelectorResolutionError):
        resolve_in_shadow_root(root, "/nav[0]")
    with pytest.raises(SelectorResolutionError):
        resolve_in_shadow_root(root, "/nav[1]/a[3]")
    with pytest.raises(SelectorResolutionError):
        resolve_in_shadow_root(root, "/")


def test_segment_without_a_shadow_host_raises() -> None:
    document = parse_html(PAGE)

    with pytest.raises(ShadowUnavailableError):
        resolve_selector_or_raise(document, "//ul|/li[1]")
    with pytest.raises(SelectorResolutionError):
        resolve_selector_or_raise(document, "|/li[1]")


def test_shadow_steps_accept_any_element_name() -> None:
    document, host, nav, first, _ = _page_with_menu()
    widget = nav.append(Element("my-el.v2"))
    office = nav.append(Element("o:p"))

    assert resolve_in_shadow_root(host.shadow_root, "/nav[1]/my-el.v2[1]") is widget
    assert resolve_in_shadow_root(host.shadow_root, "/nav[1]/o:p[1]") is office
    assert resolve_selector(document, "//x-menu|/nav[1]/my-el.v2[1]") is widget
