"""
Unit Tests for CollegeRegistry
"""
import pytest

from conftest import college_payload
from app.core.exceptions import (
    ActiveTenureHeadsError,
    CollegeNotFoundError,
    DuplicateResourceError,
)
from app.schemas.college import CollegeUpdate


class TestCollegeCrud:

    @pytest.mark.asyncio
    async def test_create_normalizes_code_and_email(self, services):
        payload = college_payload(code="vit")
        payload.contact_info.email = "Office@VIT.edu"

        college = await services.colleges.create(payload)

        assert college.code == "VIT"
        assert college.contact_email == "office@vit.edu"
        assert college.is_active is True

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected(self, services, college):
        with pytest.raises(DuplicateResourceError) as exc_info:
            await services.colleges.create(college_payload(code="rec"))

        assert exc_info.value.details["field"] == "code"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, services, college):
        with pytest.raises(DuplicateResourceError):
            await services.colleges.create(college_payload(name="Rajalakshmi Engineering College"))

    @pytest.mark.asyncio
    async def test_lookups(self, services, college):
        college_id = college.id

        assert (await services.colleges.find_by_code("rec")).id == college_id
        assert (await services.colleges.find_by_name("Rajalakshmi Engineering College")).id == college_id
        assert (await services.colleges.find_by_id(college_id)).code == "REC"

    @pytest.mark.asyncio
    async def test_update(self, services, college):
        updated = await services.colleges.update(
            college.id, CollegeUpdate(location="Thandalam", contact_info={"phone": "04412345678"})
        )

        assert updated.location == "Thandalam"
        assert updated.contact_phone == "04412345678"
        assert updated.code == "REC"

    @pytest.mark.asyncio
    async def test_update_to_taken_code(self, services, college, other_college):
        with pytest.raises(DuplicateResourceError):
            await services.colleges.update(college.id, CollegeUpdate(code="PES"))

    @pytest.mark.asyncio
    async def test_list_ordered_by_name_with_heads(self, services, college, other_college, make_admin):
        alice = await make_admin("Alice")
        await services.coordinator.assign(alice.id, college.id, 2024)

        colleges = await services.colleges.list()

        assert [c.code for c in colleges] == ["PES", "REC"]
        rec = colleges[1]
        assert [h.admin_name for h in rec.current_heads] == ["Alice"]
        assert colleges[0].current_heads == []

    @pytest.mark.asyncio
    async def test_search(self, services, college, other_college):
        results = await services.colleges.search("rajalakshmi")
        assert [c.code for c in results] == ["REC"]


class TestRoster:

    @pytest.mark.asyncio
    async def test_multiple_heads_one_per_batch(self, services, college, make_admin):
        alice = await make_admin("Alice")
        bob = await make_admin("Bob")
        await services.coordinator.assign(bob.id, college.id, 2025)
        await services.coordinator.assign(alice.id, college.id, 2024)

        heads = await services.colleges.current_heads(college.id)

        assert [(h.admin_name, h.batch_year) for h in heads] == [("Alice", 2024), ("Bob", 2025)]
        assert heads[0].admin_email == alice.email

    @pytest.mark.asyncio
    async def test_tenure_history_and_colleges_by_admin(self, services, college, other_college, make_admin):
        alice = await make_admin("Alice")
        await services.coordinator.assign(alice.id, college.id, 2024)
        await services.coordinator.assign(alice.id, other_college.id, 2024)

        history = await services.colleges.tenure_history(college.id)
        headed = await services.colleges.colleges_by_admin(alice.id)

        assert len(history) == 1 and history[0].is_active is False
        assert [c.code for c in headed] == ["PES", "REC"]


class TestSoftDelete:

    @pytest.mark.asyncio
    async def test_delete_blocked_while_heads_active(self, services, college, make_admin):
        alice = await make_admin("Alice Kumar")
        alice_id, college_id = alice.id, college.id
        await services.coordinator.assign(alice_id, college_id, 2024)

        with pytest.raises(ActiveTenureHeadsError) as exc_info:
            await services.colleges.delete(college_id)

        assert "Alice Kumar" in exc_info.value.message
        assert (await services.colleges.find_by_id(college_id)) is not None

        await services.coordinator.end_tenure(alice_id)
        await services.colleges.delete(college_id)

        assert await services.colleges.find_by_id(college_id) is None
        assert (await services.colleges.find_by_id(college_id, include_inactive=True)).is_active is False

    @pytest.mark.asyncio
    async def test_delete_names_every_active_head(self, services, college, make_admin):
        alice = await make_admin("Alice Kumar")
        bob = await make_admin("Bob Das")
        college_id = college.id
        await services.coordinator.assign(alice.id, college_id, 2024)
        await services.coordinator.assign(bob.id, college_id, 2025)
        assert await services.ledger.count_active_by_college(college_id) == 2

        with pytest.raises(ActiveTenureHeadsError) as exc_info:
            await services.colleges.delete(college_id)

        assert sorted(exc_info.value.details["active_heads"]) == ["Alice Kumar", "Bob Das"]

    @pytest.mark.asyncio
    async def test_delete_keeps_history(self, services, college, make_admin):
        alice = await make_admin("Alice")
        college_id = college.id
        await services.coordinator.assign(alice.id, college_id, 2024)
        await services.coordinator.end_tenure(alice.id)

        await services.colleges.delete(college_id)

        assert len(await services.ledger.find_history_by_college(college_id)) == 1

    @pytest.mark.asyncio
    async def test_delete_unknown(self, services):
        with pytest.raises(CollegeNotFoundError):
            await services.colleges.delete("missing")
