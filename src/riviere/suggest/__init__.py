"""riviere.suggest - Similarity scoring and near-match suggestions."""

from riviere.suggest.near_matches import (
    NearMatchMismatch,
    NearMatchQuery,
    NearMatchResult,
    find_near_matches,
    source_not_found_error,
)
from riviere.suggest.similarity import levenshtein_distance, similarity_score

__all__ = [
    "levenshtein_distance",
    "similarity_score",
    "NearMatchQuery",
    "NearMatchMismatch",
    "NearMatchResult",
    "find_near_matches",
    "source_not_found_error",
]
