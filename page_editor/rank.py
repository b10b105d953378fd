"""
Rangs fractionnaires — clés de tri lexicographiques (base 36).

Entre deux rangs a < b on peut toujours produire un rang strictement compris
entre les deux, sans renuméroter aucun autre bloc. Invariant : un rang ne se
termine jamais par le plus petit chiffre ('0'), sinon rien ne pourrait être
inséré avant lui.
"""
import string
from typing import Optional

DIGITS = string.digits + string.ascii_lowercase
BASE = len(DIGITS)
_INDEX = {c: i for i, c in enumerate(DIGITS)}


def _midpoint(a: str, b: Optional[str]) -> str:
    if b is not None:
        # préfixe commun (a complété par des '0')
        n = 0
        while n < len(b) and (a[n] if n < len(a) else DIGITS[0]) == b[n]:
            n += 1
        if n > 0:
            return b[:n] + _midpoint(a[n:], b[n:])

    da = _INDEX[a[0]] if a else 0
    db = _INDEX[b[0]] if b is not None else BASE
    if db - da > 1:
        return DIGITS[(da + db) // 2]

    # chiffres consécutifs
    if b is not None and len(b) > 1:
        return b[0]
    return DIGITS[da] + _midpoint(a[1:], None)


def is_valid_rank(rank: str) -> bool:
    return bool(rank) and rank[-1] != DIGITS[0] and all(c in _INDEX for c in rank)


def rank_between(before: Optional[str], after: Optional[str]) -> str:
    """Rang strictement entre `before` et `after` (None = borne ouverte)."""
    for r in (before, after):
        if r is not None and not is_valid_rank(r):
            raise ValueError(f"Rang invalide : {r!r}")
    if before is not None and after is not None and before >= after:
        raise ValueError(f"Rangs non ordonnés : {before!r} >= {after!r}")
    return _midpoint(before or "", after)
