"""
College Registry
College CRUD (soft delete only) and the "current heads" roster projection.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import run_atomic
from app.core.exceptions import (
    CollegeNotFoundError,
    DuplicateResourceError,
    ActiveTenureHeadsError,
    PortalError,
)
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.admin import Admin
from app.models.college import College
from app.models.tenure import TenureRecord
from app.schemas.college import (
    CollegeCreate,
    CollegeUpdate,
    CollegeResponse,
    ContactInfo,
    TenureHead,
)
from app.services.tenure_ledger import TenureLedger


def _translate_college_integrity(exc: IntegrityError) -> Optional[PortalError]:
    message = str(exc.orig)
    if "colleges.code" in message or "colleges_code" in message:
        return DuplicateResourceError("College", "code", "<concurrent insert>")
    if "colleges.name" in message or "colleges_name" in message:
        return DuplicateResourceError("College", "name", "<concurrent insert>")
    return None


class CollegeRegistry:
    """Colleges and the admins currently heading them"""

    def __init__(self, db: AsyncSession, ledger: TenureLedger):
        self.db = db
        self.ledger = ledger

    # =====================================================
    # LOOKUPS
    # =====================================================

    async def find_by_id(self, college_id: str, include_inactive: bool = False) -> Optional[College]:
        query = select(College).where(College.id == college_id)
        if not include_inactive:
            query = query.where(College.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_code(self, code: str, include_inactive: bool = False) -> Optional[College]:
        query = select(College).where(College.code == code.strip().upper())
        if not include_inactive:
            query = query.where(College.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str, include_inactive: bool = False) -> Optional[College]:
        query = select(College).where(College.name == name.strip())
        if not include_inactive:
            query = query.where(College.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get(self, college_id: str) -> College:
        """Active college or CollegeNotFoundError"""
        college = await self.find_by_id(college_id)
        if college is None:
            raise CollegeNotFoundError(college_id)
        return college

    async def list(self, active_only: bool = True) -> List[CollegeResponse]:
        """Colleges ordered by name, each with its current heads attached"""
        query = select(College).order_by(College.name)
        if active_only:
            query = query.where(College.is_active == True)
        result = await self.db.execute(query)
        return await self._with_heads(result.scalars().all())

    async def search(self, term: str) -> List[CollegeResponse]:
        pattern = f"%{term.strip()}%"
        result = await self.db.execute(
            select(College)
            .where(
                College.is_active == True,
                or_(
                    College.name.ilike(pattern),
                    College.code.ilike(pattern),
                    College.location.ilike(pattern)
                )
            )
            .order_by(College.name)
        )
        return await self._with_heads(result.scalars().all())

    # =====================================================
    # ROSTER
    # =====================================================

    async def current_heads(self, college_id: str) -> List[TenureHead]:
        heads = await self.ledger.find_active_heads_for_colleges([college_id])
        return [self._to_head(record, admin) for record, admin in heads[college_id]]

    async def describe(self, college: College) -> CollegeResponse:
        views = await self._with_heads([college])
        return views[0]

    async def get_view(self, college_id: str) -> CollegeResponse:
        return await self.describe(await self.get(college_id))

    async def tenure_history(self, college_id: str) -> List[TenureRecord]:
        """Every tenure at the college, newest first"""
        await self.get(college_id)
        return await self.ledger.find_history_by_college(college_id)

    async def colleges_by_admin(self, admin_id: str) -> List[College]:
        """Colleges the admin has ever headed, most recent tenure first"""
        result = await self.db.execute(
            select(College)
            .join(TenureRecord, TenureRecord.college_id == College.id)
            .where(TenureRecord.admin_id == admin_id)
            .order_by(TenureRecord.start_date.desc())
        )
        return list(result.scalars().all())

    async def _with_heads(self, colleges) -> List[CollegeResponse]:
        colleges = list(colleges)
        heads = await self.ledger.find_active_heads_for_colleges(c.id for c in colleges)
        return [self._to_response(college, heads.get(college.id, [])) for college in colleges]

    @staticmethod
    def _to_head(record: TenureRecord, admin: Admin) -> TenureHead:
        return TenureHead(
            tenure_id=record.id,
            admin_id=admin.id,
            admin_name=admin.full_name,
            admin_email=admin.email,
            batch_year=record.batch_year,
            start_date=record.start_date,
        )

    @classmethod
    def _to_response(cls, college: College, heads: List[Tuple[TenureRecord, Admin]]) -> CollegeResponse:
        return CollegeResponse(
            id=college.id,
            name=college.name,
            code=college.code,
            location=college.location,
            address=college.address,
            contact_info=ContactInfo(
                email=college.contact_email,
                phone=college.contact_phone,
                website=college.website,
            ),
            is_active=college.is_active,
            created_at=college.created_at,
            updated_at=college.updated_at,
            current_heads=[cls._to_head(record, admin) for record, admin in heads],
        )

    # =====================================================
    # MUTATIONS
    # =====================================================

    async def create(self, data: CollegeCreate, timeout: Optional[float] = None) -> College:
        code = data.code.upper()

        async def work() -> College:
            if await self.find_by_code(code, include_inactive=True):
                raise DuplicateResourceError("College", "code", code)
            if await self.find_by_name(data.name, include_inactive=True):
                raise DuplicateResourceError("College", "name", data.name)

            college = College(
                name=data.name,
                code=code,
                location=data.location,
                address=data.address,
                contact_email=data.contact_info.email.lower(),
                contact_phone=data.contact_info.phone,
                website=data.contact_info.website,
                is_active=True,
            )
            self.db.add(college)
            await self.db.flush()
            return college

        college = await run_atomic(
            self.db, work, operation="college.create", timeout=timeout,
            translate=_translate_college_integrity,
        )
        logger.info(f"[College] Created {college.code} ({college.id})")
        return college

    async def update(self, college_id: str, data: CollegeUpdate, timeout: Optional[float] = None) -> College:
        changes = data.model_dump(exclude_unset=True)

        async def work() -> College:
            college = await self.get(college_id)

            if changes.get("code"):
                code = changes["code"].strip().upper()
                existing = await self.find_by_code(code, include_inactive=True)
                if existing and existing.id != college.id:
                    raise DuplicateResourceError("College", "code", code)
                college.code = code
            if changes.get("name"):
                name = changes["name"].strip()
                existing = await self.find_by_name(name, include_inactive=True)
                if existing and existing.id != college.id:
                    raise DuplicateResourceError("College", "name", name)
                college.name = name
            if changes.get("location"):
                college.location = changes["location"].strip()
            if changes.get("address"):
                college.address = changes["address"].strip()

            contact = changes.get("contact_info") or {}
            if contact.get("email"):
                college.contact_email = contact["email"].lower()
            if contact.get("phone"):
                college.contact_phone = contact["phone"]
            if "website" in contact:
                college.website = contact["website"]

            college.updated_at = utcnow()
            await self.db.flush()
            return college

        return await run_atomic(
            self.db, work, operation="college.update", timeout=timeout,
            translate=_translate_college_integrity,
        )

    async def delete(self, college_id: str, timeout: Optional[float] = None) -> None:
        """
        Soft delete (is_active=False).

        Raises:
            CollegeNotFoundError: unknown or already deleted college
            ActiveTenureHeadsError: while any tenure at the college is active
        """
        async def work() -> None:
            result = await self.db.execute(
                select(College)
                .where(College.id == college_id, College.is_active == True)
                .with_for_update()
            )
            college = result.scalar_one_or_none()
            if college is None:
                raise CollegeNotFoundError(college_id)

            if await self.ledger.count_active_by_college(college_id):
                heads = await self.current_heads(college_id)
                raise ActiveTenureHeadsError(college_id, [head.admin_name for head in heads])

            college.is_active = False
            college.updated_at = utcnow()
            await self.db.flush()

        try:
            await run_atomic(self.db, work, operation="college.delete", timeout=timeout)
        except ActiveTenureHeadsError as e:
            logger.warning(f"[College] Delete refused for {college_id}: {e.message}")
            raise
        logger.info(f"[College] Soft-deleted {college_id}")


# Factory function
def get_college_registry(db: AsyncSession) -> CollegeRegistry:
    return CollegeRegistry(db, TenureLedger(db))
