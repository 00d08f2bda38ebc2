"""
Content digest for deed tamper detection.

A deed's data fields are joined in a fixed order with ``|`` and hashed with
SHA-256 over the UTF-8 bytes. The digest is rendered as 64 lowercase hex
characters.

The field order in ``CANONICAL_FIELDS`` is part of the stored format: every
digest already sealed in the ledger was computed with it, so reordering,
adding or removing a field invalidates all of them.

No normalization is applied. Case changes and whitespace-only edits produce a
different digest and therefore fail verification.
"""

import hashlib
from dataclasses import astuple, dataclass, fields

SEPARATOR = "|"
DIGEST_HEX_LEN = 64


@dataclass(frozen=True)
class DeedFields:
    """The deed data covered by the digest, in canonical order."""

    deed_number: str
    owner_name: str
    owner_nic: str
    land_extent: str
    land_location: str
    district: str
    divisional_secretariat: str
    grama_niladhari_division: str
    survey_plan_number: str
    notary_name: str
    registration_date: str
    previous_owner: str


CANONICAL_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(DeedFields))


def canonicalize(deed: DeedFields) -> str:
    """Join the deed fields in canonical order."""
    return SEPARATOR.join(astuple(deed))


def compute_digest(deed: DeedFields) -> str:
    """SHA-256 hex digest of the canonical deed string."""
    return hashlib.sha256(canonicalize(deed).encode("utf-8")).hexdigest()


def verify_digest(deed: DeedFields, recorded_digest: str) -> bool:
    """True iff the digest of the current fields equals the recorded one."""
    return compute_digest(deed) == recorded_digest
