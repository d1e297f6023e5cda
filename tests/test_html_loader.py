from anchorxpath.dom import HTML_NAMESPACE, MATHML_NAMESPACE, SVG_NAMESPACE
from anchorxpath.html_loader import parse_html


def test_parse_builds_document_with_html_root() -> None:
    document = parse_html("<html><body><p class='intro'>Hello <b>there</b></p></body></html>")

    root = document.document_element
    paragraph = document.body.children[0]

    assert root.tag_name == "html"
    assert paragraph.class_list == ["intro"]
    assert paragraph.text_content == "Hello there"
    assert paragraph.namespace is None


def test_comments_are_dropped_but_their_tails_are_kept() -> None:
    document = parse_html("<html><body><p>before<!-- note -->after</p></body></html>")

    paragraph = document.body.children[0]

    assert paragraph.children == []
    assert paragraph.text_content == "beforeafter"


def test_foreign_content_gets_namespaces() -> None:
    document = parse_html(
        "<html><body>"
        "<svg><lineargradient id='g'></lineargradient>"
        "<foreignobject><div>html again</div></foreignobject></svg>"
        "<math><mi>x</mi></math>"
        "</body></html>"
    )
    svg, math = document.body.children
    gradient, foreign = svg.children

    assert svg.namespace == SVG_NAMESPACE
    assert gradient.local_name == "linearGradient"
    assert gradient.namespace == SVG_NAMESPACE
    assert foreign.local_name == "foreignObject"
    assert foreign.children[0].namespace is None
    assert foreign.children[0].in_default_namespace
    assert math.namespace == MATHML_NAMESPACE
    assert math.children[0].namespace == MATHML_NAMESPACE
    assert HTML_NAMESPACE not in (svg.namespace, math.namespace)


def test_declarative_shadow_roots_attach_to_their_parent() -> None:
    document = parse_html(
        "<html><body>"
        "<x-open><template shadowrootmode='open'><span>inside</span></template><b>light</b></x-open>"
        "<x-closed><template shadowroot='closed'><span>hidden</span></template></x-closed>"
        "<div><template><span>inert</span></template></div>"
        "</body></html>"
    )
    open_host, closed_host, plain = document.body.children

    assert [child.tag_name for child in open_host.children] == ["b"]
    assert open_host.shadow_root.children[0].text_content == "inside"
    assert open_host.text_content == "light"
    assert closed_host.hosts_shadow_root
    assert closed_host.shadow_root is None
    assert plain.children[0].tag_name == "template"
