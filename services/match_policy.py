"""
Candidate selection for name searches.

WooCommerce's `search` parameter is a substring/relevance search, so a
query for "Tools" may return "Hand Tools" and "Power Tools". Both the
category and product resolvers apply the same rule:

1. a case-insensitive exact name match wins, whatever else came back;
2. otherwise a single candidate is accepted as a partial match;
3. otherwise the query is ambiguous.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class MatchKind(str, Enum):
    """Outcome of choose_candidate()."""
    NONE = "NONE"
    EXACT = "EXACT"
    SINGLE = "SINGLE"
    AMBIGUOUS = "AMBIGUOUS"


@dataclass
class CandidateMatch:
    kind: MatchKind
    candidate: Optional[dict] = None
    candidates: list[dict] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.candidate is not None


def record_name(record: dict) -> str:
    """Name field of a WooCommerce record, '' when absent."""
    name = record.get("name")
    return name if isinstance(name, str) else ""


def names_equal(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


def choose_candidate(
    identifier: str,
    candidates: list[dict],
    name_of: Callable[[dict], str] = record_name,
    matches: Callable[[str, str], bool] = names_equal
) -> CandidateMatch:
    """
    Pick the record a search result refers to.

    Args:
        identifier: What the caller asked for
        candidates: Records returned by the upstream search, in upstream order
        name_of: Extracts the comparable name from a record
        matches: Name equality predicate (case-insensitive by default)

    Returns:
        CandidateMatch; candidate is set for EXACT and SINGLE
    """
    candidates = list(candidates)

    if not candidates:
        return CandidateMatch(kind=MatchKind.NONE)

    for candidate in candidates:
        if matches(name_of(candidate), identifier):
            return CandidateMatch(
                kind=MatchKind.EXACT,
                candidate=candidate,
                candidates=candidates
            )

    if len(candidates) == 1:
        return CandidateMatch(
            kind=MatchKind.SINGLE,
            candidate=candidates[0],
            candidates=candidates
        )

    return CandidateMatch(kind=MatchKind.AMBIGUOUS, candidates=candidates)


def record_id(record: dict[str, Any]) -> int:
    """Integer ID of a WooCommerce record."""
    return int(record["id"])
