"""Artist-name matching shared by the direct and similarity tiers.

The rule is bidirectional, case-insensitive substring containment: a
listened artist matches a performer when either name contains the other.
This catches "The Artist" vs "Artist" and "Björk" vs "Björk Guðmundsdóttir"
without any name normalization.  Characters are compared exactly after
case folding, so "Bjork" does not match "Björk".

Short or generic names (e.g. "Air") can produce false positives.
"""

from __future__ import annotations

from collections.abc import Iterable


def names_overlap(first: str, second: str) -> bool:
    """Return ``True`` if either name is a case-insensitive substring of the other.

    Empty names never match, otherwise ``""`` would be contained in
    everything.
    """
    a = first.lower()
    b = second.lower()
    if not a or not b:
        return False
    return a in b or b in a


def matches_any_performer(artist_name: str, performers: Iterable[str]) -> bool:
    """Return ``True`` if *artist_name* overlaps with at least one performer."""
    return any(names_overlap(performer, artist_name) for performer in performers)
