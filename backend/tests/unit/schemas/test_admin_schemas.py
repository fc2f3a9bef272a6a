"""
Unit Tests for admin and tenure request schemas
"""
import pytest
from pydantic import TypeAdapter, ValidationError

from app.schemas.admin import AdminCreate, SuperAdminCreate, CollegeAdminCreate, AdminUpdate
from app.schemas.tenure import AssignTenureRequest, TransferTenureRequest
from app.schemas.member import MemberCreate

admin_create = TypeAdapter(AdminCreate)

ACCOUNT = {
    "username": "alice",
    "email": "alice@campus.edu",
    "password": "secret123",
    "full_name": "Alice Kumar",
}


class TestAdminCreateVariants:
    """The role tag decides which shape is accepted"""

    def test_super_admin_variant(self):
        parsed = admin_create.validate_python({**ACCOUNT, "role": "super-admin"})
        assert isinstance(parsed, SuperAdminCreate)

    def test_college_admin_variant_coerces_batch_year(self):
        parsed = admin_create.validate_python({
            **ACCOUNT, "role": "admin", "college_id": "c1", "batch_year": "2025"
        })

        assert isinstance(parsed, CollegeAdminCreate)
        assert parsed.batch_year == 2025

    def test_super_admin_cannot_carry_college_or_batch(self):
        with pytest.raises(ValidationError):
            admin_create.validate_python({
                **ACCOUNT, "role": "super-admin", "college_id": "c1", "batch_year": 2025
            })

    def test_college_admin_requires_college_and_batch(self):
        with pytest.raises(ValidationError):
            admin_create.validate_python({**ACCOUNT, "role": "admin"})

    def test_college_admin_rejects_fractional_batch(self):
        with pytest.raises(ValidationError):
            admin_create.validate_python({
                **ACCOUNT, "role": "admin", "college_id": "c1", "batch_year": "2025.0"
            })

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            admin_create.validate_python({**ACCOUNT, "role": "faculty"})

    def test_username_length_bounds(self):
        with pytest.raises(ValidationError):
            SuperAdminCreate(**{**ACCOUNT, "username": "ab", "role": "super-admin"})


class TestAdminUpdate:

    def test_role_cannot_be_changed_through_profile_update(self):
        with pytest.raises(ValidationError):
            AdminUpdate(role="super-admin")

    def test_partial_update_tracks_set_fields(self):
        update = AdminUpdate(full_name="Alice K")
        assert update.model_dump(exclude_unset=True) == {"full_name": "Alice K"}


class TestTenureRequests:

    def test_assign_batch_year_optional(self):
        request = AssignTenureRequest(admin_id="a1", college_id="c1")
        assert request.batch_year is None

    def test_assign_batch_year_from_string(self):
        request = AssignTenureRequest(admin_id="a1", college_id="c1", batch_year="2024")
        assert request.batch_year == 2024

    def test_transfer_empty_batch_year_means_not_given(self):
        request = TransferTenureRequest(admin_id="a1", college_id="c2", batch_year="")
        assert request.batch_year is None

    def test_member_create_rejects_non_numeric_batch(self):
        with pytest.raises(ValidationError):
            MemberCreate(full_name="Ravi", email="ravi@campus.edu", college_id="c1", batch_year="abc")
