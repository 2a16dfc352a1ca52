"""Token-set Jaccard similarity used for duplicate detection."""

from __future__ import annotations

from collections.abc import Iterable

from prompt_distiller.l1_entities.template import SimilarMatch, Template

DUPLICATE_THRESHOLD = 0.5
BROAD_THRESHOLD = 0.3


def _tokens(text: str) -> set[str]:
    return set(text.lower().split())


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """|A ∩ B| / |A ∪ B| over lower-cased whitespace tokens; 0.0 when both are empty."""
    a = _tokens(text_a)
    b = _tokens(text_b)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def find_similar(target: Template, candidates: Iterable[Template], threshold: float) -> list[SimilarMatch]:
    """Score *target* against every other candidate; keep those >= *threshold*, best first."""
    matches = [
        SimilarMatch(template=t, similarity=jaccard_similarity(target.content, t.content))
        for t in candidates
        if t.id != target.id
    ]
    kept = [m for m in matches if m.similarity >= threshold]
    return sorted(kept, key=lambda m: m.similarity, reverse=True)
