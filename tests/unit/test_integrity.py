"""Tests for deed sealing and tamper verification."""

from datetime import date

import pytest

from deed_registry.common.exceptions import NotFoundError
from deed_registry.deeds.service import DeedService
from deed_registry.integrity.hasher import compute_digest
from deed_registry.integrity.service import build_deed_fields
from deed_registry.lands.models import LandModel
from deed_registry.owners.models import OwnerModel


async def _verify(db, registry, deed_number="D001"):
    async with db.get_session() as session:
        return await registry.integrity.verify(session, deed_number)


class TestSeal:
    async def test_digest_covers_land_and_owner(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            deed = await registry.deeds.get_deed(session, "D001")
            land = await session.get(LandModel, "L001")
            owner = await session.get(OwnerModel, "123456789V")
            fields = build_deed_fields(deed, land, owner)
            entry = await registry.ledger.lookup(session, "D001")

        assert fields.owner_name == "John Doe"
        assert fields.land_extent == "10 Perches"
        assert fields.land_location == "Kollupitiya"
        assert fields.grama_niladhari_division == "Kollupitiya West"
        assert fields.registration_date == "2024-01-15"
        assert fields.previous_owner == "James Fernando"
        assert entry.digest == compute_digest(fields)


class TestVerify:
    async def test_fresh_deed_is_valid(self, db, registry, seeded, create_deed):
        await create_deed()
        result = await _verify(db, registry)
        assert result.is_valid is True
        assert result.current_digest == result.recorded_digest
        assert result.sequence_number > 1000

    async def test_edited_date_detected(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(
                session, "D001", registration_date=date(2024, 2, 1),
            )
        result = await _verify(db, registry)
        assert result.is_valid is False
        assert result.current_digest != result.recorded_digest

    async def test_reverting_edit_restores_validity(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", owner_nic="987654321V")
        assert (await _verify(db, registry)).is_valid is False
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", owner_nic="123456789V")
        assert (await _verify(db, registry)).is_valid is True

    async def test_trailing_whitespace_detected(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", notary_name="Mr. K. Silva ")
        assert (await _verify(db, registry)).is_valid is False

    async def test_unsealed_fields_do_not_affect_validity(
        self, db, registry, seeded, create_deed,
    ):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(
                session, "D001", notes="Scanned copy filed", deed_type="Sale",
            )
        assert (await _verify(db, registry)).is_valid is True

    async def test_direct_land_tampering_detected(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            land = await session.get(LandModel, "L001")
            land.area = 12
        assert (await _verify(db, registry)).is_valid is False

    async def test_repointing_to_land_with_close_area_detected(
        self, db, registry, seeded, create_deed,
    ):
        async with db.get_session() as session:
            await registry.lands.create_land(
                session, "L100", "Colombo", "Colombo", 1234567.5, "Perches",
            )
            await registry.lands.create_land(
                session, "L101", "Colombo", "Colombo", 1234568.0, "Perches",
            )
        await create_deed("D010", land_number="L100")
        async with db.get_session() as session:
            first = await session.get(LandModel, "L100")
            second = await session.get(LandModel, "L101")
            assert first.extent == "1234567.5 Perches"
            assert second.extent == "1234568 Perches"
            await registry.deeds.update_deed(session, "D010", land_number="L101")
        assert (await _verify(db, registry, "D010")).is_valid is False

    async def test_recorded_digest_unchanged_by_edits(self, db, registry, seeded, create_deed):
        await create_deed()
        before = (await _verify(db, registry)).recorded_digest
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", survey_plan_number="SP-1")
        after = await _verify(db, registry)
        assert after.recorded_digest == before


class TestVerifyFailures:
    async def test_missing_deed(self, db, registry):
        with pytest.raises(NotFoundError, match="Deed D404 does not exist"):
            await _verify(db, registry, "D404")

    async def test_deed_without_ledger_record(self, db, registry, seeded):
        # A deed service with no integrity service wired in never seals
        unsealed = DeedService(registry.deeds.settings, registry.lands, registry.owners)
        async with db.get_session() as session:
            await unsealed.create_deed(
                session, "L001", "123456789V", date(2024, 1, 15), "Gift",
                deed_number="D050",
            )
        with pytest.raises(NotFoundError, match="Deed D050 has no ledger record"):
            await _verify(db, registry, "D050")


class TestLastVerification:
    async def test_unverified_deed_has_no_outcome(self, db, registry, seeded, create_deed):
        deed = await create_deed()
        assert deed.last_verified_at is None
        assert deed.last_verification_valid is None

    async def test_outcome_stored_on_deed(self, db, registry, seeded, create_deed):
        await create_deed()
        await _verify(db, registry)
        async with db.get_session() as session:
            deed = await registry.deeds.get_deed(session, "D001")
            assert deed.last_verification_valid is True
            assert deed.last_verified_at is not None

    async def test_latest_outcome_replaces_earlier(self, db, registry, seeded, create_deed):
        await create_deed()
        await _verify(db, registry)
        async with db.get_session() as session:
            first_checked = (await registry.deeds.get_deed(session, "D001")).last_verified_at
            await registry.deeds.update_deed(session, "D001", notary_name="Someone Else")
        await _verify(db, registry)
        async with db.get_session() as session:
            deed = await registry.deeds.get_deed(session, "D001")
            assert deed.last_verification_valid is False
            assert deed.last_verified_at >= first_checked

    async def test_recording_outcome_keeps_ledger_and_validity(
        self, db, registry, seeded, create_deed,
    ):
        await create_deed()
        first = await _verify(db, registry)
        second = await _verify(db, registry)
        assert second.is_valid is True
        assert second.recorded_digest == first.recorded_digest
