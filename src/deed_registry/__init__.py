"""Deed Registry: land, owner and deed records with a tamper-evident ledger."""

from deed_registry.client import RegistryClient
from deed_registry.deeds.identifiers import next_deed_number
from deed_registry.integrity.hasher import DeedFields, compute_digest, verify_digest

__all__ = [
    "RegistryClient",
    "next_deed_number",
    "DeedFields",
    "compute_digest",
    "verify_digest",
]
__version__ = "0.1.0"
