from __future__ import annotations

from typing import Iterable

from .models import Candidate
from .xpath_utils import count_xpath_steps

# Ordinal confidence per strategy; only the ordering is meaningful.
STRATEGY_SCORES: dict[str, int] = {
    "stable_id": 100,
    "unique_tag": 90,
    "stable_attr": 80,
    "label_anchor": 80,
    "text_anchor": 80,
    "ancestor": 70,
    "sibling": 60,
    "class": 40,
    "absolute": 0,
}


def strategy_score(strategy: str) -> int:
    try:
        return STRATEGY_SCORES[strategy]
    except KeyError:
        raise ValueError(f"Unknown strategy: {strategy!r}") from None


def candidate_sort_key(candidate: Candidate) -> tuple[int, int, int]:
    return (-candidate.score, count_xpath_steps(candidate.selector), len(candidate.selector))


def rank_candidates(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Higher score first, then fewer path steps, then the shorter string.

    The sort is stable, so full ties keep generation order.
    """
    return sorted(candidates, key=candidate_sort_key)


def best_candidate(candidates: Iterable[Candidate]) -> Candidate | None:
    ranked = rank_candidates(candidates)
    return ranked[0] if ranked else None
