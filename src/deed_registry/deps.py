"""Dependency injection singletons for the deed registry."""

from deed_registry.common.config import get_settings
from deed_registry.common.database import DatabaseManager
from deed_registry.audit.service import AuditService
from deed_registry.deeds.service import DeedService
from deed_registry.integrity.ledger import LedgerService
from deed_registry.integrity.service import IntegrityService
from deed_registry.lands.service import LandService
from deed_registry.owners.service import OwnerService
from deed_registry.transfers.service import TransferService

_db: DatabaseManager | None = None
_audit: AuditService | None = None
_integrity: IntegrityService | None = None
_lands: LandService | None = None
_owners: OwnerService | None = None
_deeds: DeedService | None = None
_transfers: TransferService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_audit_service() -> AuditService:
    global _audit
    if _audit is None:
        _audit = AuditService(get_settings())
    return _audit


def get_integrity_service() -> IntegrityService:
    global _integrity
    if _integrity is None:
        _integrity = IntegrityService(LedgerService())
    return _integrity


def get_land_service() -> LandService:
    global _lands
    if _lands is None:
        _lands = LandService(get_settings(), audit_service=get_audit_service())
    return _lands


def get_owner_service() -> OwnerService:
    global _owners
    if _owners is None:
        _owners = OwnerService(get_settings(), audit_service=get_audit_service())
    return _owners


def get_deed_service() -> DeedService:
    global _deeds
    if _deeds is None:
        _deeds = DeedService(
            get_settings(), get_land_service(), get_owner_service(),
            audit_service=get_audit_service(),
            integrity_service=get_integrity_service(),
        )
    return _deeds


def get_transfer_service() -> TransferService:
    global _transfers
    if _transfers is None:
        _transfers = TransferService(
            get_deed_service(), audit_service=get_audit_service(),
        )
    return _transfers


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _audit, _integrity, _lands, _owners, _deeds, _transfers
    _db = None
    _audit = None
    _integrity = None
    _lands = None
    _owners = None
    _deeds = None
    _transfers = None
