"""
SID/STAR procedure disambiguation.

A filed route usually names its departure and arrival procedures in a
shortened or transition-qualified form (``ETARI1A``, ``KEPER2B/26L``), while
the database stores procedure and transition identifiers separately.
Each candidate is ranked by an explicit comparator:

    EXACT_MATCH   token (before '/') equals procedure+transition   100
    TOKEN_MATCH   full raw token equals procedure+transition        50
    PREFIX_MATCH  letter part of the token prefixes the key         10
    SUFFIX_MATCH  numeric part of the token ends the key             5

Scores of all matching rules are summed; the tag records the strongest
rule that matched. The highest positive score wins, ties go to the first
candidate encountered.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from routewatch.navdb.tokens import base_identifier

DESIGNATOR_RE = re.compile(r'^([A-Z]+?)(\d.*)?$')


class ProcedureKind(str, Enum):
    """Which procedure table to consult."""
    SID = 'D'
    STAR = 'A'


class ProcedureMatch(str, Enum):
    """Strongest comparator rule that matched a candidate."""
    EXACT_MATCH = 'exact'
    TOKEN_MATCH = 'token'
    PREFIX_MATCH = 'prefix'
    SUFFIX_MATCH = 'suffix'
    NO_MATCH = 'none'


MATCH_SCORES = {
    ProcedureMatch.EXACT_MATCH: 100,
    ProcedureMatch.TOKEN_MATCH: 50,
    ProcedureMatch.PREFIX_MATCH: 10,
    ProcedureMatch.SUFFIX_MATCH: 5,
}


@dataclass(frozen=True)
class ProcedureCandidate:
    """A distinct (procedure, transition) pair available at an airport."""
    procedure: str
    transition: Optional[str] = None

    @property
    def key(self) -> str:
        return self.procedure + (self.transition or '')


@dataclass(frozen=True)
class ProcedureScore:
    match: ProcedureMatch
    score: int


def split_designator(raw: str) -> Tuple[str, str]:
    """Split ``ETARI1A`` into (``ETARI``, ``1A``); unparseable input is all prefix."""
    match = DESIGNATOR_RE.match(raw)
    if not match:
        return raw, ''
    return match.group(1), match.group(2) or ''


def score_procedure(token: str, candidate: ProcedureCandidate) -> ProcedureScore:
    raw = base_identifier(token)
    prefix, suffix = split_designator(raw)
    key = candidate.key

    matched = []
    if raw.upper() == key.upper():
        matched.append(ProcedureMatch.EXACT_MATCH)
    if token.upper() == key.upper():
        matched.append(ProcedureMatch.TOKEN_MATCH)
    if prefix and prefix.upper() == key[:len(prefix)].upper():
        matched.append(ProcedureMatch.PREFIX_MATCH)
    if suffix and key.endswith(suffix):
        matched.append(ProcedureMatch.SUFFIX_MATCH)

    if not matched:
        return ProcedureScore(ProcedureMatch.NO_MATCH, 0)
    return ProcedureScore(matched[0], sum(MATCH_SCORES[m] for m in matched))


def select_procedure(
    token: str,
    candidates: List[ProcedureCandidate],
) -> Optional[ProcedureCandidate]:
    """
    Pick the best candidate for a route token.

    Falls back to the first candidate whose procedure id equals the raw
    token (ignoring its transition) when nothing scores.
    """
    best = None
    best_score = 0
    for candidate in candidates:
        result = score_procedure(token, candidate)
        if result.score > best_score:
            best, best_score = candidate, result.score

    if best is not None:
        return best

    raw = base_identifier(token).upper()
    for candidate in candidates:
        if candidate.procedure.upper() == raw:
            return ProcedureCandidate(candidate.procedure, None)
    return None
