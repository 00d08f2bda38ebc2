#!/usr/bin/env python3
"""Seed the database with a sample land, owner and deed.

Usage:
    python -m scripts.seed_registry
    # or from project root:
    python scripts/seed_registry.py
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from deed_registry.common.config import get_settings
from deed_registry.common.database import DatabaseManager
from deed_registry.audit.service import AuditService
from deed_registry.deeds.service import DeedService
from deed_registry.integrity.ledger import LedgerService
from deed_registry.integrity.service import IntegrityService
from deed_registry.lands.service import LandService
from deed_registry.owners.service import OwnerService

SEED_LANDS = [
    {
        "land_number": "L001",
        "district": "Colombo",
        "division": "Colombo",
        "local_division": "Kollupitiya West",
        "area": 10,
        "area_unit": "Perches",
        "map_reference": "Kollupitiya",
    },
]

SEED_OWNERS = [
    {
        "nic": "123456789V",
        "full_name": "John Perera",
        "address": "12 Galle Road, Colombo 03",
        "contact_number": "0771234567",
        "previous_owner": "James Fernando",
    },
]

SEED_DEEDS = [
    {
        "deed_number": "D001",
        "land_number": "L001",
        "owner_nic": "123456789V",
        "registration_date": date(2024, 1, 15),
        "deed_type": "Sale",
        "notary_name": "Mr. K. Silva",
        "survey_plan_number": "SP-1234",
    },
]


async def seed_registry() -> None:
    settings = get_settings()
    db = DatabaseManager(settings)
    await db.init()
    await db.create_all()

    audit = AuditService(settings)
    lands = LandService(settings, audit_service=audit)
    owners = OwnerService(settings, audit_service=audit)
    deeds = DeedService(
        settings, lands, owners,
        audit_service=audit,
        integrity_service=IntegrityService(LedgerService()),
    )

    async with db.get_session() as session:
        for seed in SEED_LANDS:
            if await lands.get_land(session, seed["land_number"]):
                print(f"  [skip] land {seed['land_number']} already exists")
                continue
            await lands.create_land(session, actor="seed", **seed)
            print(f"  [created] land {seed['land_number']}")

        for seed in SEED_OWNERS:
            if await owners.get_owner(session, seed["nic"]):
                print(f"  [skip] owner {seed['nic']} already exists")
                continue
            await owners.create_owner(session, actor="seed", **seed)
            print(f"  [created] owner {seed['nic']} ({seed['full_name']})")

        for seed in SEED_DEEDS:
            if await deeds.get_deed(session, seed["deed_number"]):
                print(f"  [skip] deed {seed['deed_number']} already exists")
                continue
            await deeds.create_deed(session, actor="seed", **seed)
            print(f"  [created] deed {seed['deed_number']}")

    await db.close()
    print("\nDone.")


if __name__ == "__main__":
    asyncio.run(seed_registry())
