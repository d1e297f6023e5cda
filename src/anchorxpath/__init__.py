"""Template-stable XPath generation with shadow-DOM compound selectors."""

from __future__ import annotations

__version__ = "0.1.0"

from .dom import Document, Element, ShadowRoot
from .errors import (
    AnchorXPathError,
    BrowserUnavailableError,
    EvaluationError,
    InvalidInputError,
    PageCaptureError,
    SelectorResolutionError,
    ShadowUnavailableError,
)
from .evaluator import LxmlXPathEvaluator, XPathEvaluator
from .generator import generate_candidates, generate_xpath
from .html_loader import parse_html
from .models import Candidate, GeneratorSettings
from .resolver import resolve_selector, resolve_selector_or_raise

__all__ = [
    "AnchorXPathError",
    "BrowserUnavailableError",
    "Candidate",
    "Document",
    "Element",
    "EvaluationError",
    "GeneratorSettings",
    "InvalidInputError",
    "LxmlXPathEvaluator",
    "PageCaptureError",
    "SelectorResolutionError",
    "ShadowRoot",
    "ShadowUnavailableError",
    "XPathEvaluator",
    "__version__",
    "generate_candidates",
    "generate_xpath",
    "parse_html",
    "resolve_selector",
    "resolve_selector_or_raise",
]
