"""Tests for land, owner and deed registration, update, deletion and search."""

from datetime import date

import pytest

from deed_registry.common.exceptions import (
    ConflictError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)


class TestLands:
    async def test_create_land(self, db, registry):
        async with db.get_session() as session:
            land = await registry.lands.create_land(
                session, "L001", "Colombo", "Colombo", 10, "Perches",
                map_reference="Kollupitiya",
            )
            assert land.land_number == "L001"
            assert land.extent == "10 Perches"

    async def test_fractional_extent(self, db, registry):
        async with db.get_session() as session:
            land = await registry.lands.create_land(
                session, "L002", "Kandy", "Gangawata Korale", 1.5, "Acres",
            )
            assert land.extent == "1.5 Acres"

    async def test_extent_keeps_every_digit(self, db, registry):
        async with db.get_session() as session:
            land = await registry.lands.create_land(
                session, "L003", "Galle", "Galle", 1234567.25, "Perches",
            )
            assert land.extent == "1234567.25 Perches"

    async def test_duplicate_land_conflict(self, db, registry, seeded):
        with pytest.raises(ConflictError, match="Land L001 already exists"):
            async with db.get_session() as session:
                await registry.lands.create_land(
                    session, "L001", "Galle", "Galle", 5, "Perches",
                )

    async def test_blank_district_rejected(self, db, registry):
        with pytest.raises(InvalidInputError):
            async with db.get_session() as session:
                await registry.lands.create_land(session, "L009", "  ", "X", 1, "Acres")

    async def test_non_positive_area_rejected(self, db, registry):
        with pytest.raises(InvalidInputError):
            async with db.get_session() as session:
                await registry.lands.create_land(session, "L009", "Galle", "X", 0, "Acres")

    async def test_list_lands_by_district(self, db, registry, seeded):
        async with db.get_session() as session:
            await registry.lands.create_land(session, "L002", "Galle", "Galle", 2, "Acres")
        async with db.get_session() as session:
            colombo = await registry.lands.list_lands(session, district="Colombo")
            assert [land.land_number for land in colombo] == ["L001"]
            assert len(await registry.lands.list_lands(session)) == 2


class TestOwners:
    async def test_create_owner(self, db, registry):
        async with db.get_session() as session:
            owner = await registry.owners.create_owner(
                session, "123456789V", "John Doe", contact_number="0771234567",
            )
            assert owner.nic == "123456789V"
            assert owner.previous_owner is None

    async def test_duplicate_owner_conflict(self, db, registry, seeded):
        with pytest.raises(ConflictError, match="Owner 123456789V already exists"):
            async with db.get_session() as session:
                await registry.owners.create_owner(session, "123456789V", "Someone Else")

    async def test_search_owners_by_name_or_nic(self, db, registry, seeded):
        async with db.get_session() as session:
            by_name = await registry.owners.list_owners(session, query="jane")
            assert [o.nic for o in by_name] == ["987654321V"]
            by_nic = await registry.owners.list_owners(session, query="12345")
            assert [o.nic for o in by_nic] == ["123456789V"]
            assert len(await registry.owners.list_owners(session)) == 2


class TestCreateDeed:
    async def test_create_deed_defaults_active(self, db, registry, seeded, create_deed):
        deed = await create_deed()
        assert deed.deed_number == "D001"
        assert deed.status == "ACTIVE"
        assert deed.previous_deed_number is None

    async def test_duplicate_deed_conflict(self, db, registry, seeded, create_deed):
        await create_deed()
        with pytest.raises(ConflictError, match="Deed D001 already exists"):
            await create_deed()

    async def test_missing_land(self, db, registry, seeded, create_deed):
        with pytest.raises(NotFoundError, match="Land L404 does not exist"):
            await create_deed(land_number="L404")

    async def test_missing_owner(self, db, registry, seeded, create_deed):
        with pytest.raises(NotFoundError, match="Owner 000000000V does not exist"):
            await create_deed(owner_nic="000000000V")

    async def test_failed_create_leaves_nothing(self, db, registry, seeded, create_deed):
        with pytest.raises(NotFoundError):
            await create_deed(owner_nic="000000000V")
        async with db.get_session() as session:
            assert await registry.deeds.get_deed(session, "D001") is None
            assert await registry.ledger.lookup(session, "D001") is None

    async def test_number_allocated_when_absent(self, db, registry, seeded, create_deed):
        first = await create_deed(deed_number=None)
        second = await create_deed(deed_number=None)
        assert first.deed_number == "D001"
        assert second.deed_number == "D002"

    async def test_deed_is_sealed(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            entry = await registry.ledger.lookup(session, "D001")
            assert entry is not None
            assert len(entry.digest) == 64

    async def test_create_audited(self, db, registry, seeded, create_deed):
        await create_deed(actor="registrar1")
        async with db.get_session() as session:
            events = await registry.audit.get_events(session, action="CREATE")
            newest = events[0]
            assert newest.user == "registrar1"
            assert newest.details == "Registered deed: D001 for land L001"


class TestAllocateDeedNumber:
    async def test_empty_registry(self, db, registry):
        async with db.get_session() as session:
            assert await registry.deeds.allocate_deed_number(session) == "D001"
            assert await registry.deeds.allocate_deed_number(session, "D005") == "D005-01"

    async def test_counts_existing(self, db, registry, seeded, create_deed):
        await create_deed("D001")
        await create_deed("D002")
        async with db.get_session() as session:
            assert await registry.deeds.allocate_deed_number(session) == "D003"

    async def test_deleted_numbers_stay_retired(self, db, registry, seeded, create_deed):
        await create_deed("D001")
        await create_deed("D002")
        async with db.get_session() as session:
            await registry.deeds.delete_deed(session, "D002")
        async with db.get_session() as session:
            assert await registry.deeds.allocate_deed_number(session) == "D003"

    async def test_raced_number_is_a_conflict(self, db, registry, seeded, create_deed):
        async with db.get_session() as session:
            reserved = await registry.deeds.allocate_deed_number(session)
        await create_deed(reserved)
        with pytest.raises(ConflictError):
            await create_deed(reserved, owner_nic="987654321V")


class TestUpdateDeed:
    async def test_update_fields(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            deed = await registry.deeds.update_deed(
                session, "D001", deed_type="Sale", notes="Corrected type",
            )
            assert deed.deed_type == "Sale"
            assert deed.notes == "Corrected type"

    async def test_clear_notes(self, db, registry, seeded, create_deed):
        await create_deed(notes="old note")
        async with db.get_session() as session:
            deed = await registry.deeds.update_deed(session, "D001", notes=None)
            assert deed.notes is None
        async with db.get_session() as session:
            assert (await registry.deeds.get_deed(session, "D001")).notes is None

    async def test_unmentioned_fields_kept(self, db, registry, seeded, create_deed):
        await create_deed(notes="old note")
        async with db.get_session() as session:
            deed = await registry.deeds.update_deed(session, "D001", deed_type="Sale")
            assert deed.notes == "old note"

    async def test_required_field_cannot_be_cleared(self, db, registry, seeded, create_deed):
        await create_deed()
        with pytest.raises(InvalidInputError, match="Field 'deed_type' is required"):
            async with db.get_session() as session:
                await registry.deeds.update_deed(session, "D001", deed_type=None)

    async def test_update_missing(self, db, registry):
        with pytest.raises(NotFoundError, match="Deed D404 does not exist"):
            async with db.get_session() as session:
                await registry.deeds.update_deed(session, "D404", notes="x")

    async def test_update_to_missing_owner(self, db, registry, seeded, create_deed):
        await create_deed()
        with pytest.raises(NotFoundError):
            async with db.get_session() as session:
                await registry.deeds.update_deed(session, "D001", owner_nic="000000000V")

    async def test_update_ignores_snapshot_fields(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            deed = await registry.deeds.update_deed(
                session, "D001", previous_deed_number="D999",
            )
            assert deed.previous_deed_number is None

    async def test_transferred_cannot_be_reactivated(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", status="TRANSFERRED")
        with pytest.raises(InvalidStateError):
            async with db.get_session() as session:
                await registry.deeds.update_deed(session, "D001", status="ACTIVE")

    async def test_update_does_not_touch_ledger(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            before = (await registry.ledger.lookup(session, "D001")).digest
        async with db.get_session() as session:
            await registry.deeds.update_deed(
                session, "D001", registration_date=date(2024, 2, 1),
            )
        async with db.get_session() as session:
            after = (await registry.ledger.lookup(session, "D001")).digest
        assert before == after

    async def test_update_audited(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.update_deed(session, "D001", notes="n", deed_type="Sale")
        async with db.get_session() as session:
            events = await registry.audit.get_events(session, action="UPDATE")
            assert events[0].details == "Updated deed: D001 (deed_type, notes)"


class TestDeleteDeed:
    async def test_delete(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.delete_deed(session, "D001", actor="registrar1")
        async with db.get_session() as session:
            assert await registry.deeds.get_deed(session, "D001") is None
            events = await registry.audit.get_events(session, action="DELETE")
            assert events[0].details == "Deleted deed: D001 (land L001, owner 123456789V)"
            assert events[0].user == "registrar1"

    async def test_delete_keeps_ledger_entry(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.delete_deed(session, "D001")
        async with db.get_session() as session:
            assert await registry.ledger.lookup(session, "D001") is not None

    async def test_delete_missing(self, db, registry):
        with pytest.raises(NotFoundError):
            async with db.get_session() as session:
                await registry.deeds.delete_deed(session, "D404")


class TestStatusCounts:
    async def test_empty_registry(self, db, registry):
        async with db.get_session() as session:
            counts = await registry.deeds.status_counts(session)
            assert counts == {"total": 0, "active": 0, "transferred": 0}

    async def test_counts_after_transfer(self, db, registry, seeded, create_deed):
        await create_deed("D001")
        await create_deed("D002", owner_nic="987654321V")
        async with db.get_session() as session:
            await registry.transfers.transfer(
                session, "D001", "987654321V", date(2024, 6, 1), "Sale",
            )
        async with db.get_session() as session:
            counts = await registry.deeds.status_counts(session)
            assert counts == {"total": 3, "active": 2, "transferred": 1}


class TestSearchDeeds:
    async def test_matches_deed_land_and_owner(self, db, registry, seeded, create_deed):
        await create_deed("D001")
        await create_deed("D002", owner_nic="987654321V")
        async with db.get_session() as session:
            assert [d.deed_number for d in await registry.deeds.search_deeds(session, "d002")] == ["D002"]
            assert len(await registry.deeds.search_deeds(session, "l001")) == 2
            by_owner = await registry.deeds.search_deeds(session, "98765")
            assert [d.deed_number for d in by_owner] == ["D002"]

    async def test_blank_query_returns_nothing(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            assert await registry.deeds.search_deeds(session, "") == []
            assert await registry.deeds.search_deeds(session, "   ") == []
            assert await registry.audit.get_events(session, action="SEARCH") == []

    async def test_wildcards_are_literal(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            assert await registry.deeds.search_deeds(session, "%") == []

    async def test_search_audited_with_actor(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.search_deeds(session, "D00", actor="clerk7")
        async with db.get_session() as session:
            events = await registry.audit.get_events(session, action="SEARCH")
            assert events[0].user == "clerk7"
            assert "D00" in events[0].details

    async def test_search_audited_default_label(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            await registry.deeds.search_deeds(session, "D00")
        async with db.get_session() as session:
            events = await registry.audit.get_events(session, action="SEARCH")
            assert events[0].user == "Admin"


class TestLandHistory:
    async def test_single_deed(self, db, registry, seeded, create_deed):
        await create_deed()
        async with db.get_session() as session:
            history = await registry.lands.land_history(session, "L001")
            assert [d.deed_number for d in history] == ["D001"]

    async def test_ordered_by_registration_desc(self, db, registry, seeded, create_deed):
        await create_deed("D001", registration_date=date(2020, 5, 1))
        await create_deed("D002", registration_date=date(2023, 5, 1))
        await create_deed("D003", registration_date=date(2021, 5, 1))
        async with db.get_session() as session:
            history = await registry.lands.land_history(session, "L001")
            assert [d.deed_number for d in history] == ["D002", "D003", "D001"]

    async def test_unknown_land_empty(self, db, registry):
        async with db.get_session() as session:
            assert await registry.lands.land_history(session, "L404") == []
