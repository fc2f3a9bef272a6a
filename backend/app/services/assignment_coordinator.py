"""
Assignment Coordinator
The only writer of tenure state. Every public operation is one transaction:
ledger rows and the admin's denormalized snapshot commit together or not at all.

Concurrency:
- Partial unique indexes (one active head per college+batch, one active
  tenure per admin) make it impossible for two racing assigns to both commit;
  the loser's IntegrityError is translated into the matching conflict.
- On PostgreSQL the admin and college rows are locked FOR UPDATE.
- Each operation runs under a deadline and rolls back on timeout or cancellation.
"""

from typing import Optional, Callable
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import run_atomic
from app.core.exceptions import (
    PortalError,
    ConflictError,
    AdminNotFoundError,
    CollegeNotFoundError,
    BatchYearConflictError,
    AdminAlreadyAssignedError,
    ValidationError,
    RoleAssignmentError,
)
from app.core.logging_config import logger
from app.core.types import coerce_batch_year, to_naive_utc, utcnow
from app.models.admin import Admin, AdminRole
from app.models.college import College
from app.models.tenure import TenureRecord
from app.schemas.admin import CollegeAdminCreate
from app.services.admin_directory import AdminDirectory, translate_admin_integrity
from app.services.tenure_ledger import TenureLedger


def canonical_batch_year(value) -> Optional[int]:
    """
    Integer batch year within the configured range, or None when not given.

    Raises:
        ValidationError: unparseable or out of range
    """
    if value is None:
        return None
    try:
        year = coerce_batch_year(value)
    except ValueError as e:
        raise ValidationError(str(e), field="batch_year") from e

    low, high = settings.batch_year_range()
    if not low <= year <= high:
        raise ValidationError(f"Batch year must be between {low} and {high}", field="batch_year")
    return year


def tenure_conflict_translator(
    admin_id: Optional[str],
    college_id: Optional[str],
    batch_year: Optional[int],
) -> Callable[[IntegrityError], Optional[PortalError]]:
    """Map a constraint violation raised at flush/commit to the domain conflict it represents"""

    def translate(exc: IntegrityError) -> Optional[PortalError]:
        message = str(exc.orig)
        # PostgreSQL names the index; SQLite lists the indexed columns
        if "uq_tenure_active_college_batch" in message or (
            "college_tenure_heads.college_id" in message and "college_tenure_heads.batch_year" in message
        ):
            return BatchYearConflictError(college_id, batch_year)
        if "uq_tenure_active_admin" in message or message.rstrip().endswith("college_tenure_heads.admin_id"):
            return AdminAlreadyAssignedError(admin_id)
        return translate_admin_integrity(exc)

    return translate


class AssignmentCoordinator:
    """Assign, transfer and end admin tenures"""

    def __init__(self, db: AsyncSession, ledger: TenureLedger, directory: AdminDirectory):
        self.db = db
        self.ledger = ledger
        self.directory = directory

    # =====================================================
    # ASSIGN / TRANSFER
    # =====================================================

    async def assign(
        self,
        admin_id: str,
        college_id: str,
        batch_year=None,
        start_date: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> TenureRecord:
        """
        Give `admin_id` the active tenure for (college_id, batch_year).

        If the admin currently heads a different college that tenure is ended
        first. A previous (admin, college) row is reactivated instead of
        inserting a second one. An explicit start_date may not lie in the future.

        Raises:
            AdminNotFoundError, CollegeNotFoundError, BatchYearConflictError,
            ValidationError, StorageError, OperationTimeoutError
        """
        batch_year = canonical_batch_year(batch_year)
        start_date = to_naive_utc(start_date)
        if start_date is not None and start_date > utcnow():
            raise ValidationError("Tenure start date cannot be in the future", field="start_date")
        previous = {}

        async def work() -> TenureRecord:
            admin = await self._lock_admin(admin_id)
            current = await self.ledger.find_active_by_admin(admin.id)
            if current is not None:
                previous["college_id"] = current.college_id
            return await self._assign_locked(admin, college_id, batch_year, start_date)

        try:
            record = await run_atomic(
                self.db, work,
                operation="tenure.assign",
                timeout=timeout,
                translate=tenure_conflict_translator(admin_id, college_id, batch_year),
            )
        except ConflictError as e:
            logger.log_tenure_event("assign rejected", admin_id, college_id, batch_year, reason=e.code)
            raise

        moved_from = previous.get("college_id")
        if moved_from and moved_from != college_id:
            logger.log_tenure_event("transferred", admin_id, college_id, batch_year, from_college_id=moved_from)
        else:
            logger.log_tenure_event("assigned", admin_id, college_id, batch_year)
        return record

    async def transfer_admin(
        self,
        admin_id: str,
        new_college_id: str,
        batch_year=None,
        timeout: Optional[float] = None,
    ) -> TenureRecord:
        """
        Move an admin to another college. Same checks as assign; without an
        explicit batch year the admin's most recent one is carried over.
        """
        await self.directory.get(admin_id)

        if batch_year is None:
            latest = await self.ledger.find_latest_by_admin(admin_id)
            if latest is None:
                raise ValidationError(
                    "Batch year is required: admin has no previous tenure to carry it over from",
                    field="batch_year"
                )
            batch_year = latest.batch_year

        return await self.assign(admin_id, new_college_id, batch_year, timeout=timeout)

    async def _assign_locked(
        self,
        admin: Admin,
        college_id: str,
        batch_year: Optional[int],
        start_date: Optional[datetime],
    ) -> TenureRecord:
        """The four assign steps; caller owns the transaction"""
        if admin.role == AdminRole.SUPER_ADMIN:
            raise RoleAssignmentError(
                "Super admins cannot be assigned to a college or batch year",
                role=admin.role.value
            )
        if batch_year is None:
            raise ValidationError("Batch year is required for college admins", field="batch_year")

        college = await self._lock_college(college_id)

        # 1. Someone else already heads this batch
        holder = await self.ledger.find_active_by_college_and_batch(college.id, batch_year)
        if holder is not None and holder.admin_id != admin.id:
            raise BatchYearConflictError(
                college.id, batch_year,
                college_name=college.name,
                holder_admin_id=holder.admin_id
            )

        # 2. Leaving another college
        current = await self.ledger.find_active_by_admin(admin.id)
        if current is not None and current.college_id != college.id:
            await self.ledger.end(current)

        # 3. Reactivate the (admin, college) row or open a new one
        existing = await self.ledger.find_by_admin_and_college(admin.id, college.id)
        if existing is None:
            record = await self.ledger.insert(admin.id, college.id, batch_year, start_date)
        elif existing.is_active and existing.batch_year == batch_year and start_date is None:
            record = existing
        else:
            record = await self.ledger.update_by_id(
                existing.id,
                batch_year=batch_year,
                start_date=start_date or utcnow(),
                end_date=None,
                is_active=True,
            )

        # 4. Snapshot
        self._apply_snapshot(admin, record)
        await self.db.flush()
        return record

    # =====================================================
    # END
    # =====================================================

    async def end_tenure(
        self,
        admin_id: str,
        end_date: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        End the admin's active tenure and clear its snapshot.

        Returns False (and changes nothing) when there is no active tenure.

        Raises:
            AdminNotFoundError: unknown admin
            ValidationError: end_date before the tenure's start_date
        """
        end_date = to_naive_utc(end_date)

        async def work() -> Optional[TenureRecord]:
            admin = await self._lock_admin(admin_id, include_inactive=True)
            current = await self.ledger.find_active_by_admin(admin.id)
            if current is None:
                return None
            if end_date is not None and end_date < current.start_date:
                raise ValidationError("End date cannot be before the tenure start date", field="end_date")

            ended = await self.ledger.end(current, end_date)
            self._clear_snapshot(admin)
            await self.db.flush()
            return ended

        ended = await run_atomic(self.db, work, operation="tenure.end", timeout=timeout)
        if ended is None:
            logger.debug(f"[Tenure] end_tenure no-op for admin {admin_id}")
            return False

        logger.log_tenure_event("ended", admin_id, ended.college_id, ended.batch_year)
        return True

    # =====================================================
    # ADMIN LIFECYCLE
    # =====================================================

    async def register_admin(self, data, timeout: Optional[float] = None) -> Admin:
        """
        Create an admin from a SuperAdminCreate / CollegeAdminCreate payload.
        A college admin is assigned in the same transaction.
        """
        is_college_admin = isinstance(data, CollegeAdminCreate)
        batch_year = canonical_batch_year(data.batch_year) if is_college_admin else None
        college_id = data.college_id if is_college_admin else None

        async def work() -> Admin:
            admin = await self.directory.create(
                username=data.username,
                email=data.email,
                password=data.password,
                full_name=data.full_name,
                role=AdminRole(data.role),
                permissions=data.permissions,
            )
            if is_college_admin:
                await self._assign_locked(admin, college_id, batch_year, None)
            return admin

        try:
            admin = await run_atomic(
                self.db, work,
                operation="admin.register",
                timeout=timeout,
                translate=tenure_conflict_translator(None, college_id, batch_year),
            )
        except BatchYearConflictError as e:
            logger.log_tenure_event("assign rejected", data.email, college_id, batch_year, reason=e.code)
            raise

        logger.info(f"[Admin] Registered {admin.email} as {admin.role.value}")
        if is_college_admin:
            logger.log_tenure_event("assigned", admin.id, college_id, batch_year)
        return admin

    async def deactivate_admin(self, admin_id: str, timeout: Optional[float] = None) -> None:
        """Soft delete: end any active tenure and mark the admin inactive"""

        async def work() -> Optional[TenureRecord]:
            admin = await self._lock_admin(admin_id)
            current = await self.ledger.find_active_by_admin(admin.id)
            if current is not None:
                await self.ledger.end(current)
                self._clear_snapshot(admin)
            admin.is_active = False
            admin.updated_at = utcnow()
            await self.db.flush()
            return current

        ended = await run_atomic(self.db, work, operation="admin.deactivate", timeout=timeout)
        if ended is not None:
            logger.log_tenure_event("ended", admin_id, ended.college_id, ended.batch_year, reason="deactivated")
        logger.info(f"[Admin] Deactivated {admin_id}")

    # =====================================================
    # HELPERS
    # =====================================================

    async def _lock_admin(self, admin_id: str, include_inactive: bool = False) -> Admin:
        query = select(Admin).where(Admin.id == admin_id)
        if not include_inactive:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query.with_for_update())
        admin = result.scalar_one_or_none()
        if admin is None:
            raise AdminNotFoundError(admin_id)
        return admin

    async def _lock_college(self, college_id: str) -> College:
        result = await self.db.execute(
            select(College)
            .where(College.id == college_id, College.is_active == True)
            .with_for_update()
        )
        college = result.scalar_one_or_none()
        if college is None:
            raise CollegeNotFoundError(college_id)
        return college

    @staticmethod
    def _apply_snapshot(admin: Admin, record: TenureRecord) -> None:
        admin.assigned_college_id = record.college_id
        admin.batch_year = record.batch_year
        admin.tenure_start_date = record.start_date
        admin.tenure_end_date = None
        admin.tenure_is_active = True
        admin.updated_at = utcnow()

    @staticmethod
    def _clear_snapshot(admin: Admin) -> None:
        admin.assigned_college_id = None
        admin.batch_year = None
        admin.tenure_start_date = None
        admin.tenure_end_date = None
        admin.tenure_is_active = False
        admin.updated_at = utcnow()


# Factory function
def get_assignment_coordinator(db: AsyncSession) -> AssignmentCoordinator:
    ledger = TenureLedger(db)
    return AssignmentCoordinator(db, ledger, AdminDirectory(db, ledger))
