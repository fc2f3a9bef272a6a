"""
Member Registrar
Self-registration of members under a college and batch year. A member can
only join a batch that an admin currently governs.
"""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import run_atomic
from app.core.exceptions import (
    PortalError,
    ConflictError,
    CollegeNotFoundError,
    MemberNotFoundError,
    DuplicateResourceError,
    ValidationError,
)
from app.core.logging_config import logger
from app.models.college import College
from app.models.user import Member
from app.schemas.member import MemberCreate
from app.services.batch_validation import BatchValidationGateway
from app.services.admin_directory import normalize_email


def format_member_id(sequence: int) -> str:
    """MEM0001, MEM0002, ... (the number widens past the padding when needed)"""
    return f"{settings.MEMBER_ID_PREFIX}{sequence:0{settings.MEMBER_ID_WIDTH}d}"


def _translate_member_integrity(exc: IntegrityError) -> Optional[PortalError]:
    message = str(exc.orig)
    if "users.email" in message or "users_email" in message:
        return DuplicateResourceError("Member", "email", "<concurrent insert>")
    if "users.member_id" in message or "users_member_id" in message:
        return ConflictError("Member id was allocated concurrently, please retry", code="MEMBER_ID_TAKEN")
    return None


class MemberRegistrar:
    """Register members and look them up"""

    def __init__(self, db: AsyncSession, gateway: BatchValidationGateway):
        self.db = db
        self.gateway = gateway

    async def register(self, data: MemberCreate, timeout: Optional[float] = None) -> Member:
        """
        Raises:
            CollegeNotFoundError: unknown or inactive college
            DuplicateResourceError: email already registered
            ValidationError: no active admin governs the batch
        """
        email = normalize_email(data.email)

        async def work() -> Member:
            college = await self.db.get(College, data.college_id)
            if college is None or not college.is_active:
                raise CollegeNotFoundError(data.college_id)

            if await self.find_by_email(email):
                raise DuplicateResourceError("Member", "email", email)

            check = await self.gateway.validate(data.college_id, data.batch_year)
            if not check.valid:
                raise ValidationError(check.error, field="batch_year")

            count = await self.db.scalar(select(func.count(Member.id))) or 0
            member = Member(
                member_id=format_member_id(count + 1),
                full_name=data.full_name.strip(),
                email=email,
                phone=data.phone,
                college_id=data.college_id,
                batch_year=data.batch_year,
                is_active=True,
            )
            self.db.add(member)
            await self.db.flush()
            return member

        member = await run_atomic(
            self.db, work,
            operation="member.register",
            timeout=timeout,
            translate=_translate_member_integrity,
        )
        logger.info(f"[Member] Registered {member.member_id} at {member.college_id}/{member.batch_year}")
        return member

    async def find_by_email(self, email: str) -> Optional[Member]:
        result = await self.db.execute(
            select(Member).where(Member.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def list_by_batch(self, college_id: str, batch_year: int) -> List[Member]:
        result = await self.db.execute(
            select(Member)
            .where(
                Member.college_id == college_id,
                Member.batch_year == batch_year,
                Member.is_active == True
            )
            .order_by(Member.member_id)
        )
        return list(result.scalars().all())

    async def get_in_batch(self, college_id: str, batch_year: int, member_id: str) -> Member:
        """A single member, visible only inside the given (college, batch year)"""
        result = await self.db.execute(
            select(Member).where(
                Member.member_id == member_id,
                Member.college_id == college_id,
                Member.batch_year == batch_year,
                Member.is_active == True
            )
        )
        member = result.scalar_one_or_none()
        if member is None:
            raise MemberNotFoundError(member_id)
        return member
