from anchorxpath.selector_rules import (
    class_rejection_reasons,
    has_stable_text,
    id_rejection_reasons,
    is_stable_class,
    is_stable_id,
    normalize_space,
    stable_classes,
    text_rejection_reasons,
)


def test_readable_ids_are_stable() -> None:
    assert is_stable_id("product-title")
    assert is_stable_id("submitButton")
    assert is_stable_id("section-2")


def test_generated_ids_are_rejected() -> None:
    assert not is_stable_id("")
    assert not is_stable_id(None)
    assert not is_stable_id("u_0_9_QM")
    assert not is_stable_id("_r_8_")
    assert not is_stable_id("a1b2c3d4e5f6")
    assert not is_stable_id("550e8400-e29b-41d4-a716-446655440000")
    assert not is_stable_id("item12345")
    assert not is_stable_id("ember123")
    assert not is_stable_id("react-select-input")
    assert not is_stable_id("vue-app")
    assert not is_stable_id("field_12")


def test_id_rejection_reasons_name_the_matching_rule() -> None:
    assert id_rejection_reasons("u_0_9_QM") == ("underscore-token-run",)
    assert id_rejection_reasons("field_12") == ("dynamic-suffix",)
    assert id_rejection_reasons("item12345") == ("trailing-digit-run",)
    assert id_rejection_reasons("") == ("empty",)
    assert id_rejection_reasons("product-title") == ()


def test_class_stability() -> None:
    assert is_stable_class("product-title")
    assert is_stable_class("card")
    assert is_stable_class("tabular-nums")
    assert not is_stable_class("md:flex")
    assert not is_stable_class("w-[200px]")
    assert not is_stable_class("css-1abc")
    assert not is_stable_class("sc-bdVaJa")
    assert not is_stable_class("abcdefghij")
    assert not is_stable_class("productTitle")
    assert not is_stable_class("col-6")
    assert class_rejection_reasons("md:flex") == ("utility-modifier",)


def test_stable_classes_keeps_token_order() -> None:
    tokens = ["card", "css-1x2y", "featured", "md:p-4", "mt-2"]
    assert stable_classes(tokens) == ["card", "featured"]


def test_text_stability() -> None:
    assert has_stable_text("Add to cart")
    assert has_stable_text("Free shipping")
    assert has_stable_text("Price")
    assert has_stable_text("  Price  ")


def test_unstable_text_is_rejected() -> None:
    assert not has_stable_text("")
    assert not has_stable_text("A")
    assert not has_stable_text("Ab" * 21)
    assert not has_stable_text("Acme Widget")
    assert not has_stable_text("John Ronald Tolkien")
    assert not has_stable_text("username")
    assert not has_stable_text("Price:")
    assert not has_stable_text("$19.99")
    assert not has_stable_text("Über")


def test_text_rejection_reasons() -> None:
    assert text_rejection_reasons("Acme Widget") == ("person-name",)
    assert text_rejection_reasons("   ") == ("empty",)
    assert "not-letters-and-spaces" in text_rejection_reasons("Price:")


def test_normalize_space_collapses_and_truncates() -> None:
    assert normalize_space("  Add \n\t to   cart ") == "Add to cart"
    assert normalize_space(None) == ""
    assert normalize_space("abcdef", limit=3) == "abc"
