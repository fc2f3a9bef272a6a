"""
Tenure Ledger
Durable, append-mostly store of admin <-> college <-> batch-year assignments.

Rows are never deleted: the only mutation after insert is the open/ended
transition (is_active, end_date) plus the fields assign re-stamps when it
reactivates an (admin, college) row.
"""

from typing import List, Optional, Dict, Any, Iterable, Tuple
from datetime import datetime
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin import Admin
from app.models.tenure import TenureRecord
from app.core.types import utcnow

# Fields update_by_id may touch; identity columns stay fixed once written
MUTABLE_FIELDS = frozenset({"batch_year", "start_date", "end_date", "is_active"})


class TenureLedger:
    """Query and write access to the college_tenure_heads table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =====================================================
    # WRITES
    # =====================================================

    async def insert(
        self,
        admin_id: str,
        college_id: str,
        batch_year: int,
        start_date: Optional[datetime] = None,
    ) -> TenureRecord:
        """Open a new tenure; flushed immediately so index violations surface here"""
        record = TenureRecord(
            admin_id=admin_id,
            college_id=college_id,
            batch_year=batch_year,
            start_date=start_date or utcnow(),
            end_date=None,
            is_active=True,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def update_by_id(self, record_id: str, **changes: Any) -> Optional[TenureRecord]:
        """
        Apply `changes` to one record and flush.

        Raises:
            ValueError: for fields outside MUTABLE_FIELDS
        """
        unknown = set(changes) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Tenure fields cannot be updated: {', '.join(sorted(unknown))}")

        record = await self.db.get(TenureRecord, record_id)
        if record is None:
            return None

        for field, value in changes.items():
            setattr(record, field, value)
        record.updated_at = utcnow()
        await self.db.flush()
        return record

    async def end(self, record: TenureRecord, end_date: Optional[datetime] = None) -> TenureRecord:
        """
        Close an open tenure. Ending an already-ended record is a no-op.
        Without an explicit end_date the record ends now, never before its start.
        """
        if not record.is_active:
            return record
        if end_date is None:
            end_date = max(utcnow(), record.start_date)
        return await self.update_by_id(record.id, is_active=False, end_date=end_date)

    # =====================================================
    # LOOKUPS
    # =====================================================

    async def find_by_id(self, record_id: str) -> Optional[TenureRecord]:
        return await self.db.get(TenureRecord, record_id)

    async def find_active_by_college_and_batch(self, college_id: str, batch_year: int) -> Optional[TenureRecord]:
        result = await self.db.execute(
            select(TenureRecord).where(
                TenureRecord.college_id == college_id,
                TenureRecord.batch_year == batch_year,
                TenureRecord.is_active == True
            )
        )
        return result.scalar_one_or_none()

    async def find_active_by_admin(self, admin_id: str) -> Optional[TenureRecord]:
        result = await self.db.execute(
            select(TenureRecord).where(
                TenureRecord.admin_id == admin_id,
                TenureRecord.is_active == True
            )
        )
        return result.scalar_one_or_none()

    async def find_by_admin_and_college(self, admin_id: str, college_id: str) -> Optional[TenureRecord]:
        result = await self.db.execute(
            select(TenureRecord).where(
                TenureRecord.admin_id == admin_id,
                TenureRecord.college_id == college_id
            )
        )
        return result.scalar_one_or_none()

    async def find_latest_by_admin(self, admin_id: str) -> Optional[TenureRecord]:
        """Most recently started tenure for the admin, active or not"""
        result = await self.db.execute(
            select(TenureRecord)
            .where(TenureRecord.admin_id == admin_id)
            .order_by(TenureRecord.start_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_all_active_by_college(self, college_id: str) -> List[TenureRecord]:
        """The college's current heads, one per batch year"""
        result = await self.db.execute(
            select(TenureRecord)
            .where(
                TenureRecord.college_id == college_id,
                TenureRecord.is_active == True
            )
            .order_by(TenureRecord.batch_year)
        )
        return list(result.scalars().all())

    async def count_active_by_college(self, college_id: str) -> int:
        return await self.db.scalar(
            select(func.count(TenureRecord.id)).where(
                TenureRecord.college_id == college_id,
                TenureRecord.is_active == True
            )
        ) or 0

    async def find_history_by_college(self, college_id: str) -> List[TenureRecord]:
        """Every tenure ever recorded at the college, newest start first"""
        result = await self.db.execute(
            select(TenureRecord)
            .where(TenureRecord.college_id == college_id)
            .order_by(TenureRecord.start_date.desc())
        )
        return list(result.scalars().all())

    async def find_history_by_admin(self, admin_id: str) -> List[TenureRecord]:
        result = await self.db.execute(
            select(TenureRecord)
            .where(TenureRecord.admin_id == admin_id)
            .order_by(TenureRecord.start_date.desc())
        )
        return list(result.scalars().all())

    async def find_active_heads_for_colleges(
        self, college_ids: Iterable[str]
    ) -> Dict[str, List[Tuple[TenureRecord, Admin]]]:
        """Active tenures joined with their admins, grouped by college (one query)"""
        ids = list(college_ids)
        heads: Dict[str, List[Tuple[TenureRecord, Admin]]] = {college_id: [] for college_id in ids}
        if not ids:
            return heads

        result = await self.db.execute(
            select(TenureRecord, Admin)
            .join(Admin, Admin.id == TenureRecord.admin_id)
            .where(
                TenureRecord.college_id.in_(ids),
                TenureRecord.is_active == True
            )
            .order_by(TenureRecord.batch_year)
        )
        for record, admin in result.all():
            heads[record.college_id].append((record, admin))
        return heads
