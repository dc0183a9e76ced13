"""
Station name resolution.

Matches a free-text token against the station catalog. A station is a
candidate when its id (or display name) contains the token; among the
candidates the one with the shortest id wins, and on ties the first one
in catalog order is kept.

The score is always computed from the id length, even when the match came
from the display name.
"""

from typing import Iterable, List, Optional
from .models import Station


def _is_candidate(station: Station, token: str, match_names: bool) -> bool:
    if token in station.id:
        return True
    return match_names and token in station.name.lower()


def find_best_match(token: str, stations: Iterable[Station], match_names: bool = True) -> Optional[str]:
    """
    Resolve a user token to a canonical station id.

    Args:
        token: Text typed by the user, any case
        stations: Catalog to search, in upstream order
        match_names: Also accept matches on the display name

    Returns:
        The best matching station id, or None when nothing matches
    """
    token = token.lower()
    best_id = None
    best_delta = 0

    for station in stations:
        if not _is_candidate(station, token, match_names):
            continue

        delta = len(station.id) - len(token)
        if best_id is None or delta < best_delta:
            best_id = station.id
            best_delta = delta

    return best_id


def search_stations(token: str, stations: Iterable[Station]) -> List[Station]:
    """Return every station whose id or name contains the token, in catalog order."""
    token = token.lower()
    return [s for s in stations if _is_candidate(s, token, True)]
