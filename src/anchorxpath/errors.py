from __future__ import annotations


class AnchorXPathError(Exception):
    """Base class for every error raised by anchorxpath."""


class InvalidInputError(AnchorXPathError, TypeError):
    """The generator was given something that is not an element."""


class EvaluationError(AnchorXPathError):
    """A path query could not be evaluated by the active evaluator."""

    def __init__(self, query: str, reason: str) -> None:
        super().__init__(f"Cannot evaluate {query!r}: {reason}")
        self.query = query
        self.reason = reason


class SelectorResolutionError(AnchorXPathError):
    """A stored selector does not resolve to an element."""


class ShadowUnavailableError(SelectorResolutionError):
    """A shadow segment needs a shadow root the current element does not expose."""


class HistoryStoreError(AnchorXPathError):
    """History entries could not be read or written."""


class BrowserUnavailableError(AnchorXPathError):
    """Playwright or its Chromium build is missing."""


class PageCaptureError(AnchorXPathError):
    """A live page could not be loaded or snapshotted."""
