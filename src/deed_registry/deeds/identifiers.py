"""
Deed number allocation.

Two numbering schemes:

- Fresh registration: a letter prefix and a zero-padded serial, ``D001``,
  ``D002``, ... The padding is a minimum width, so ``D999`` is followed by
  ``D1000``.
- Transfer chain: the superseded deed number plus a two-digit serial,
  ``D001-01``, ``D001-02``, ...

The highest existing identifier is the longest one, ties broken by the
lexicographically greatest. Comparing length first keeps ``D1000`` above
``D999`` even though it sorts lower as a plain string.
"""

import re
from typing import Iterable, Optional

DEFAULT_PREFIX = "D"
FRESH_PAD = 3
CHAIN_PAD = 2

# ASCII digits only; fullmatch rejects a trailing newline
_FRESH_RE = re.compile(r"[A-Za-z][0-9]+")
_SERIAL_RE = re.compile(r"[0-9]+")


def _highest(candidates: list[str]) -> str:
    return max(candidates, key=lambda c: (len(c), c))


def first_deed_number(previous: Optional[str] = None) -> str:
    """Identifier used when nothing has been allocated yet in a scheme."""
    if previous:
        return f"{previous}-{1:0{CHAIN_PAD}d}"
    return f"{DEFAULT_PREFIX}{1:0{FRESH_PAD}d}"


def next_deed_number(existing: Iterable[str], previous: Optional[str] = None) -> str:
    """Compute the next deed number given the identifiers already in use.

    Args:
        existing: every deed number currently allocated
        previous: deed number being superseded by a transfer, or None for a
            fresh registration

    Returns:
        The next identifier in the applicable scheme.
    """
    if previous:
        chain_prefix = f"{previous}-"
        # Only direct successors; D001-01-01 belongs to the D001-01 chain.
        candidates = [
            c for c in existing
            if c.startswith(chain_prefix)
            and _SERIAL_RE.fullmatch(c[len(chain_prefix):])
        ]
        if not candidates:
            return first_deed_number(previous)
        serial = int(_highest(candidates)[len(chain_prefix):])
        return f"{previous}-{serial + 1:0{CHAIN_PAD}d}"

    candidates = [c for c in existing if _FRESH_RE.fullmatch(c)]
    if not candidates:
        return first_deed_number()
    highest = _highest(candidates)
    serial = int(highest[1:])
    return f"{highest[0]}{serial + 1:0{FRESH_PAD}d}"
