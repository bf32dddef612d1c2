"""
Club and nation name normalization and lookup.

Match records reference clubs and nations by name string, and those
strings drift from the canonical records over time:
- "FC Vandermeer" vs "fc vandermeer "
- "Île Rouge" vs "Ile Rouge"

Ledgers are keyed by the normalized name so that spelling noise does not
split one club into two entries. Canonical ids are attached afterwards,
by exact normalized match only. Fuzzy scores are used to suggest a
likely record in the logs when a name has no exact match; they never
attach an id.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import jellyfish
from rapidfuzz import fuzz

logger = logging.getLogger(__name__)


def normalize_name(name: Optional[str]) -> str:
    """
    Normalize a club or nation name for keying and comparison.

    Normalization steps:
    1. Trim and case-fold
    2. Remove accents (é → e, ñ → n)
    3. Collapse internal whitespace

    Examples:
        >>> normalize_name("  FC Vandermeer ")
        'fc vandermeer'
        >>> normalize_name("Île  Rouge")
        'ile rouge'
    """
    if not name:
        return ""

    normalized = name.strip().casefold()

    # NFD splits accented characters into base + combining mark,
    # then the marks are dropped
    normalized = unicodedata.normalize("NFD", normalized)
    normalized = "".join(
        char for char in normalized
        if unicodedata.category(char) != "Mn"
    )

    return " ".join(normalized.split())


def compare_names(name1: str, name2: str) -> float:
    """
    Score the similarity of two names from 0.0 to 1.0.

    Takes the best of Jaro-Winkler (typos), token sort ratio (word
    order, "Real Ostra" vs "Ostra Real") and plain ratio.
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)

    if not n1 or not n2:
        return 0.0
    if n1 == n2:
        return 1.0

    jw_score = jellyfish.jaro_winkler_similarity(n1, n2)
    token_sort = fuzz.token_sort_ratio(n1, n2) / 100.0
    ratio = fuzz.ratio(n1, n2) / 100.0

    return max(jw_score, token_sort, ratio)


@dataclass(frozen=True)
class NameSuggestion:
    """A canonical record that looks like an unmatched name."""
    name: str
    id: Any
    score: float


class NameIndex:
    """
    Lookup from normalized canonical names to record ids.

    Usage:
        index = NameIndex((n.name, n.id) for n in nations)
        index.resolve("Ile Rouge")  # -> id of "Île Rouge", or None
    """

    def __init__(self, entries: Iterable[tuple[str, Any]], kind: str = "record"):
        self.kind = kind
        self._ids: dict[str, Any] = {}
        self._names: dict[str, str] = {}
        self._warned: set[str] = set()
        for name, record_id in entries:
            key = normalize_name(name)
            # First record wins when two canonical names collide
            if key and key not in self._ids:
                self._ids[key] = record_id
                self._names[key] = name

    def __len__(self) -> int:
        return len(self._ids)

    def resolve(self, name: Optional[str]) -> Any:
        """Return the id for an exact normalized match, or None."""
        return self._ids.get(normalize_name(name))

    def suggest(self, name: Optional[str], threshold: float) -> Optional[NameSuggestion]:
        """Return the most similar canonical record scoring at least threshold."""
        key = normalize_name(name)
        if not key:
            return None

        best: Optional[NameSuggestion] = None
        for candidate_key, candidate_name in self._names.items():
            score = compare_names(key, candidate_key)
            if score >= threshold and (best is None or score > best.score):
                best = NameSuggestion(candidate_name, self._ids[candidate_key], score)
        return best

    def resolve_or_warn(self, name: Optional[str], threshold: float) -> Any:
        """
        Resolve a name, logging a data-quality warning when it has no record.

        The warning carries the best fuzzy suggestion, if any, so that the
        record (or the match data) can be fixed by hand. Each name is
        warned about once per index.
        """
        record_id = self.resolve(name)
        if record_id is not None or not name:
            return record_id

        key = normalize_name(name)
        if key in self._warned:
            return None
        self._warned.add(key)

        suggestion = self.suggest(name, threshold)
        if suggestion is not None:
            logger.warning(
                "No %s record named %r (closest: %r, score %.2f)",
                self.kind, name, suggestion.name, suggestion.score,
            )
        else:
            logger.warning("No %s record named %r", self.kind, name)
        return None
