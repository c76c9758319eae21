"""
Fuzzy free-text relevance pass.

Each searchable field is compared with the query using approximate substring
matching (difflib ratios over sliding windows of the field text). A field
counts as a hit when its similarity reaches MATCH_THRESHOLD; a recipe is kept
when at least one field hits, and its relevance is the weighted sum of the
similarities of the fields that hit.
"""
from __future__ import annotations

from difflib import SequenceMatcher

import numpy as np
import pandas as pd

# Allow roughly 40% character-level divergence before a field stops matching
MATCH_THRESHOLD = 0.6

# Shorter queries only match as exact substrings
MIN_FUZZY_LENGTH = 4

FIELD_WEIGHTS: dict[str, float] = {
    "name": 2.0,
    "description": 1.0,
    "ingredient_names": 1.0,
    "tags": 0.5,
    "cuisine_type": 0.3,
    "dish_type": 0.3,
}


def _partial_ratio(query: str, text: str) -> float:
    """Best similarity between *query* and any same-length window of *text*."""
    if not query or not text:
        return 0.0
    if query in text:
        return 1.0
    if len(query) < MIN_FUZZY_LENGTH:
        return 0.0

    matcher = SequenceMatcher(None, b=query, autojunk=False)
    width = len(query)
    if len(text) <= width:
        matcher.set_seq1(text)
        return matcher.ratio()

    best = 0.0
    for start in range(len(text) - width + 1):
        matcher.set_seq1(text[start:start + width])
        # quick_ratio() is an upper bound on ratio()
        if matcher.quick_ratio() <= best:
            continue
        best = max(best, matcher.ratio())
        if best == 1.0:
            break
    return best


def field_similarity(query: str, value: str | list[str]) -> float:
    """Similarity in [0, 1] between a lower-cased query and a field value.

    Multi-word queries also score each word separately and average the
    results, so "pasta bake" still finds "Pesto Pasta Bake".
    """
    texts = [value] if isinstance(value, str) else list(value)
    texts = [t.lower() for t in texts if t]
    if not texts:
        return 0.0

    words = query.split()
    best = 0.0
    for text in texts:
        score = _partial_ratio(query, text)
        if len(words) > 1:
            per_word = sum(_partial_ratio(w, text) for w in words) / len(words)
            score = max(score, per_word)
        best = max(best, score)
    return best


def _relevance(row: pd.Series, query: str, weights: dict[str, float]) -> float:
    fields = list(weights)
    sims = np.array([field_similarity(query, row.get(f, "")) for f in fields])
    hits = sims >= MATCH_THRESHOLD
    if not hits.any():
        return 0.0
    return float(np.dot(sims[hits], np.array([weights[f] for f in fields])[hits]))


def rank_by_relevance(
    candidates: pd.DataFrame,
    query: str,
    weights: dict[str, float] | None = None,
) -> pd.DataFrame:
    """Drop non-matching rows and order the rest by relevance, best first."""
    query = query.strip().lower()
    if not query or candidates.empty:
        return candidates

    w = weights or FIELD_WEIGHTS
    scored = candidates.copy()
    scored["_relevance"] = scored.apply(_relevance, axis=1, query=query, weights=w)
    scored = scored.loc[scored["_relevance"] > 0]
    return scored.sort_values("_relevance", ascending=False, kind="stable")
