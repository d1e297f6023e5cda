from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .dom import Document, Element, ParentNode
from .errors import BrowserUnavailableError, PageCaptureError

if TYPE_CHECKING:
    from playwright.sync_api import Page

logger = logging.getLogger(__name__)

SNAPSHOT_SCRIPT = """
() => {
  const serialize = (parent) => {
    const nodes = [];
    for (const child of parent.childNodes) {
      if (child.nodeType === Node.TEXT_NODE) {
        nodes.push(child.nodeValue || '');
        continue;
      }
      if (child.nodeType !== Node.ELEMENT_NODE) {
        continue;
      }
      const attrs = {};
      for (const attr of Array.from(child.attributes)) {
        attrs[attr.name] = attr.value;
      }
      const entry = {
        tag: child.localName,
        ns: child.namespaceURI,
        attrs,
        children: serialize(child),
      };
      if (child.shadowRoot) {
        entry.shadow = {
          mode: child.shadowRoot.mode,
          children: serialize(child.shadowRoot),
        };
      }
      nodes.push(entry);
    }
    return nodes;
  };

  return {
    url: location.href || '',
    title: document.title || '',
    children: serialize(document),
  };
}
"""


@dataclass(frozen=True, slots=True)
class PageSnapshot:
    url: str
    title: str
    document: Document


def snapshot_page(page: Page) -> PageSnapshot:
    """Serialize the live DOM of a Playwright page, open shadow roots included."""
    payload = page.evaluate(SNAPSHOT_SCRIPT)
    if not isinstance(payload, dict):
        raise ValueError("Page snapshot script returned an unexpected payload.")
    return PageSnapshot(
        url=str(payload.get("url") or ""),
        title=str(payload.get("title") or ""),
        document=document_from_snapshot(payload),
    )


def document_from_snapshot(payload: Mapping[str, Any]) -> Document:
    document = Document()
    _append_nodes(document, payload.get("children") or [])
    if document.document_element is None:
        raise ValueError("Snapshot payload has no document element.")
    return document


def _append_nodes(parent: ParentNode, nodes: Sequence[Any]) -> None:
    for node in nodes:
        if isinstance(node, str):
            parent.append_text(node)
            continue
        if not isinstance(node, Mapping):
            raise ValueError(f"Unexpected snapshot node: {node!r}")
        parent.append(_element_from_entry(node))


def _element_from_entry(entry: Mapping[str, Any]) -> Element:
    tag = str(entry.get("tag") or "").strip()
    if not tag:
        raise ValueError("Snapshot element is missing its tag.")
    attributes = {str(name): str(value) for name, value in (entry.get("attrs") or {}).items()}
    element = Element(tag, attributes, namespace=entry.get("ns") or None)
    _append_nodes(element, entry.get("children") or [])

    shadow = entry.get("shadow")
    if isinstance(shadow, Mapping):
        mode = "closed" if shadow.get("mode") == "closed" else "open"
        root = element.attach_shadow(mode)
        _append_nodes(root, shadow.get("children") or [])
    return element


_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)


def is_missing_browser_error(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def capture_url(url: str, *, timeout_ms: int = 30_000) -> PageSnapshot:
    """Render ``url`` in headless Chromium and snapshot the result."""
    try:
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import sync_playwright
    except ModuleNotFoundError as exc:
        raise BrowserUnavailableError("Playwright is not installed in this interpreter.") from exc

    with sync_playwright() as playwright:
        try:
            browser = playwright.chromium.launch(headless=True)
        except Exception as exc:
            if is_missing_browser_error(exc):
                raise BrowserUnavailableError(
                    "Chromium not installed. Run: python -m playwright install chromium"
                ) from exc
            raise
        try:
            page = browser.new_page()
            page.goto(url, wait_until="load", timeout=timeout_ms)
            snapshot = snapshot_page(page)
        except PlaywrightError as exc:
            raise PageCaptureError(f"Could not load {url}: {exc}") from exc
        except ValueError as exc:
            raise PageCaptureError(f"Could not snapshot {url}: {exc}") from exc
        finally:
            browser.close()
    logger.info("Captured %s (%s)", snapshot.url or url, snapshot.title or "untitled")
    return snapshot
