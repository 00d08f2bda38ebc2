"""Shared test fixtures for the deed registry."""

import os
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

from deed_registry.audit.service import AuditService
from deed_registry.common.config import RegistrySettings
from deed_registry.common.database import DatabaseManager
from deed_registry.deeds.service import DeedService
from deed_registry.integrity.ledger import LedgerService
from deed_registry.integrity.service import IntegrityService
from deed_registry.lands.service import LandService
from deed_registry.owners.service import OwnerService
from deed_registry.transfers.service import TransferService


API_KEY = "test-registry-api-key"


def make_settings(**overrides) -> RegistrySettings:
    defaults = {"api_key": API_KEY, "db_url": "sqlite+aiosqlite://"}
    defaults.update(overrides)
    return RegistrySettings(**defaults)


class Registry:
    """All services wired together the way deps.py wires them."""

    def __init__(self, settings: RegistrySettings):
        self.audit = AuditService(settings)
        self.ledger = LedgerService()
        self.integrity = IntegrityService(self.ledger)
        self.lands = LandService(settings, audit_service=self.audit)
        self.owners = OwnerService(settings, audit_service=self.audit)
        self.deeds = DeedService(
            settings, self.lands, self.owners,
            audit_service=self.audit,
            integrity_service=self.integrity,
        )
        self.transfers = TransferService(self.deeds, audit_service=self.audit)


@pytest.fixture
async def db():
    manager = DatabaseManager(make_settings())
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def registry():
    return Registry(make_settings())


@pytest.fixture
async def seeded(db, registry):
    """Land L001 in Colombo, owner John Doe and a second owner Jane Silva."""
    async with db.get_session() as session:
        await registry.lands.create_land(
            session, "L001", "Colombo", "Colombo", 10, "Perches",
            map_reference="Kollupitiya", local_division="Kollupitiya West",
        )
        await registry.owners.create_owner(
            session, "123456789V", "John Doe",
            address="12 Galle Road", previous_owner="James Fernando",
        )
        await registry.owners.create_owner(session, "987654321V", "Jane Silva")


@pytest.fixture
def create_deed(db, registry):
    """Register a deed over L001; keyword overrides replace the defaults."""

    async def _create(deed_number="D001", **overrides):
        fields = {
            "land_number": "L001",
            "owner_nic": "123456789V",
            "registration_date": date(2024, 1, 15),
            "deed_type": "Gift",
            "deed_number": deed_number,
            "notary_name": "Mr. K. Silva",
            "survey_plan_number": "SP-1234",
        }
        fields.update(overrides)
        async with db.get_session() as session:
            return await registry.deeds.create_deed(session, **fields)

    return _create


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def app():
    """Create a test app with in-memory DB."""
    os.environ["DEED_REGISTRY_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["DEED_REGISTRY_API_KEY"] = API_KEY

    # Clear caches and singletons so new env vars take effect
    from deed_registry.common.config import get_settings
    get_settings.cache_clear()

    from deed_registry.deps import reset_singletons
    reset_singletons()

    from deed_registry.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from deed_registry.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


@pytest.fixture
def admin_headers():
    return {"X-Registry-Api-Key": API_KEY, "X-Registry-User": "registrar1"}
