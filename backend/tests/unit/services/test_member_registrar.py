"""
Unit Tests for MemberRegistrar
"""
import pytest

from app.core.exceptions import CollegeNotFoundError, DuplicateResourceError, MemberNotFoundError, ValidationError
from app.schemas.member import MemberCreate


def member(college_id: str, batch_year, email: str = "ravi@campus.edu") -> MemberCreate:
    return MemberCreate(full_name="Ravi Shankar", email=email, college_id=college_id, batch_year=batch_year)


@pytest.fixture
async def governed_college(services, college, make_admin):
    """REC with an admin heading batch 2025"""
    bob = await make_admin("Bob")
    await services.coordinator.assign(bob.id, college.id, 2025)
    return college


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_allocates_sequential_ids(self, services, governed_college):
        first = await services.members.register(member(governed_college.id, "2025"))
        second = await services.members.register(member(governed_college.id, 2025, email="meera@campus.edu"))

        assert first.member_id == "MEM0001"
        assert second.member_id == "MEM0002"
        assert first.batch_year == 2025

    @pytest.mark.asyncio
    async def test_ungoverned_batch_rejected_with_reason(self, services, governed_college):
        college_id = governed_college.id

        with pytest.raises(ValidationError) as exc_info:
            await services.members.register(member(college_id, 2024))

        assert exc_info.value.message == "No active admin found for batch year 2024 at this college"
        assert await services.members.find_by_email("ravi@campus.edu") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, services, governed_college):
        college_id = governed_college.id
        await services.members.register(member(college_id, 2025))

        with pytest.raises(DuplicateResourceError):
            await services.members.register(member(college_id, 2025, email="RAVI@campus.edu"))

    @pytest.mark.asyncio
    async def test_unknown_college(self, services):
        with pytest.raises(CollegeNotFoundError):
            await services.members.register(member("missing", 2025))


class TestLookups:

    @pytest.mark.asyncio
    async def test_list_by_batch(self, services, governed_college):
        await services.members.register(member(governed_college.id, 2025))
        await services.members.register(member(governed_college.id, 2025, email="meera@campus.edu"))

        members = await services.members.list_by_batch(governed_college.id, 2025)

        assert [m.member_id for m in members] == ["MEM0001", "MEM0002"]
        assert await services.members.list_by_batch(governed_college.id, 2024) == []

    @pytest.mark.asyncio
    async def test_get_in_batch_is_scoped(self, services, governed_college):
        college_id = governed_college.id
        await services.members.register(member(college_id, 2025))

        found = await services.members.get_in_batch(college_id, 2025, "MEM0001")
        assert found.email == "ravi@campus.edu"

        with pytest.raises(MemberNotFoundError):
            await services.members.get_in_batch(college_id, 2024, "MEM0001")
