"""
Route string tokenization and literal coordinate parsing.

Route strings are whitespace separated. Tokens may carry a speed/level
suffix after a slash (``ETARI/N0480F350``); only the part before the slash
identifies the fix.
"""

import hashlib
import re
from typing import List, Optional, Tuple

from routewatch.models.route import Waypoint

# 2-digit latitude + hemisphere, 3-digit longitude + hemisphere: 51N030W
COORDINATE_RE = re.compile(r'^(\d{2})([NS])(\d{3})([EW])$')

# Oceanic track routing entries: 52/20 or 5230/2015 (degrees or degrees+minutes)
TRACK_COORDINATE_RE = re.compile(r'^(\d{2}(?:\d{2})?)/(\d{2}(?:\d{2})?)$')

DIRECT_TOKEN = 'DCT'


def tokenize_route(route: str) -> List[str]:
    """Split a route string and drop DCT (direct) markers."""
    return [tok for tok in route.split() if tok.upper() != DIRECT_TOKEN]


def base_identifier(token: str) -> str:
    return token.split('/')[0]


def route_fingerprint(tokens: List[str]) -> Tuple[int, str]:
    """
    Cheap content fingerprint of a token list.

    Token count plus an MD5 digest of the concatenated tokens; used to
    decide whether the route needs resolving again.
    """
    digest = hashlib.md5(''.join(tokens).encode('utf-8')).hexdigest()
    return len(tokens), digest


def parse_coordinate_token(token: str) -> Optional[Waypoint]:
    """
    Decode a literal coordinate token such as ``51N030W``.

    S and W hemispheres are negative. Returns None when the token is not
    a coordinate.
    """
    match = COORDINATE_RE.match(token)
    if not match:
        return None

    lat = float(match.group(1))
    lon = float(match.group(3))
    if match.group(2) == 'S':
        lat = -lat
    if match.group(4) == 'W':
        lon = -lon
    return Waypoint(token, lat, lon)


def _track_degrees(group: str) -> float:
    if len(group) == 4:
        return int(group[:2]) + int(group[2:]) / 60.0
    return float(int(group))


def parse_track_coordinate(entry: str) -> Optional[Waypoint]:
    """
    Decode an oceanic track routing entry such as ``52/20`` or ``5230/20``.

    North Atlantic tracks are always north/west, so longitude is negated.
    """
    match = TRACK_COORDINATE_RE.match(entry)
    if not match:
        return None
    lat = _track_degrees(match.group(1))
    lon = _track_degrees(match.group(2))
    return Waypoint(entry, lat, -lon)


def is_oceanic_track(token: str) -> bool:
    """NATA..NATZ style track designators."""
    return len(token) == 4 and token.upper().startswith('NAT')
