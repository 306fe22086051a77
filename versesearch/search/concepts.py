"""
Concept expansion for search queries.

A small hand-curated table maps a query token to related terms, so a
search for "dios" also rewards verses that say "senor" or "padre".
Expansion only widens token and context scoring; substring and bigram
scoring always use the literal query.

Terms outside the table get no semantic widening. The table is tuned for
a Spanish scripture corpus and should be revisited before the engine is
pointed at a different domain.

Example:
    - "paz" expands to {"shalom", "reposo", "descanso"}
    - "fe" expands to {"confianza", "esperanza", "fidelidad"}
"""

from typing import Dict, Iterable, List, Mapping, Sequence


# Keys and terms are already in normalized form (lowercase, no accents).
CONCEPT_EXPANSIONS: Dict[str, Sequence[str]] = {
    "dios": ("senor", "yahweh", "elohim", "padre", "todopoderoso"),
    "senor": ("dios", "yahweh", "elohim", "maestro"),
    "amor": ("misericordia", "bondad", "gracia", "caridad"),
    "fe": ("confianza", "esperanza", "fidelidad"),
    "temor": ("miedo", "reverencia", "respeto"),
    "paz": ("shalom", "reposo", "descanso"),
    "justicia": ("rectitud", "juicio", "verdad"),
    "perdon": ("perdonar", "misericordia", "gracia"),
    "salvacion": ("redencion", "liberacion", "rescate"),
    "sabiduria": ("entendimiento", "conocimiento", "discernimiento"),
    "espiritu": ("aliento", "ruah", "viento"),
}


def build_concepts(
    tokens: Iterable[str],
    expansions: Mapping[str, Sequence[str]] = CONCEPT_EXPANSIONS
) -> List[str]:
    """
    Collect the expansion terms for a list of query tokens.

    Args:
        tokens: Normalized query tokens.
        expansions: Concept table to consult.

    Returns:
        Expansion terms, de-duplicated, in first-seen order.
    """
    concepts: Dict[str, None] = {}
    for token in tokens:
        for term in expansions.get(token, ()):
            concepts.setdefault(term, None)
    return list(concepts)


def expand_tokens(
    tokens: Sequence[str],
    expansions: Mapping[str, Sequence[str]] = CONCEPT_EXPANSIONS
) -> List[str]:
    """Union of the original tokens and their concept expansions."""
    expanded: Dict[str, None] = dict.fromkeys(tokens)
    for term in build_concepts(tokens, expansions):
        expanded.setdefault(term, None)
    return list(expanded)
