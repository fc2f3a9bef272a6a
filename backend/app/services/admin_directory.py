"""
Admin Directory
Admin accounts plus the joined "current tenure" view used for API responses.
"""

from typing import List, Optional, Dict, Iterable, Tuple
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import run_atomic
from app.core.exceptions import PortalError, AdminNotFoundError, DuplicateResourceError
from app.core.security import get_password_hash, verify_password
from app.core.types import utcnow
from app.models.admin import Admin, AdminRole, default_permissions
from app.models.college import College
from app.models.tenure import TenureRecord
from app.schemas.admin import AdminResponse, AdminUpdate, TenureInfo
from app.schemas.college import CollegeSummary
from app.services.tenure_ledger import TenureLedger


def normalize_email(email: str) -> str:
    return email.strip().lower()


def translate_admin_integrity(exc: IntegrityError) -> Optional[PortalError]:
    """Unique email/username violations that slipped past the pre-checks"""
    message = str(exc.orig)
    if "admins.email" in message or "admins_email" in message:
        return DuplicateResourceError("Admin", "email", "<concurrent update>")
    if "admins.username" in message or "admins_username" in message:
        return DuplicateResourceError("Admin", "username", "<concurrent update>")
    return None


class AdminDirectory:
    """Admin lookups, listings and profile maintenance"""

    def __init__(self, db: AsyncSession, ledger: TenureLedger):
        self.db = db
        self.ledger = ledger

    # =====================================================
    # LOOKUPS
    # =====================================================

    async def find_by_id(self, admin_id: str, include_inactive: bool = False) -> Optional[Admin]:
        query = select(Admin).where(Admin.id == admin_id)
        if not include_inactive:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str, include_inactive: bool = False) -> Optional[Admin]:
        query = select(Admin).where(Admin.email == normalize_email(email))
        if not include_inactive:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str, include_inactive: bool = False) -> Optional[Admin]:
        query = select(Admin).where(Admin.username == username.strip())
        if not include_inactive:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get(self, admin_id: str) -> Admin:
        """Active admin or AdminNotFoundError"""
        admin = await self.find_by_id(admin_id)
        if admin is None:
            raise AdminNotFoundError(admin_id)
        return admin

    # =====================================================
    # JOINED VIEW
    # =====================================================

    async def describe(self, admin: Admin) -> AdminResponse:
        """Admin + its single active tenure (if any) + that tenure's college"""
        views = await self.describe_many([admin])
        return views[0]

    async def get_view(self, admin_id: str) -> AdminResponse:
        return await self.describe(await self.get(admin_id))

    async def describe_many(self, admins: Iterable[Admin]) -> List[AdminResponse]:
        admins = list(admins)
        active = await self._active_tenures_with_colleges([a.id for a in admins])
        return [self._to_view(admin, *active.get(admin.id, (None, None))) for admin in admins]

    async def _active_tenures_with_colleges(
        self, admin_ids: List[str]
    ) -> Dict[str, Tuple[TenureRecord, College]]:
        if not admin_ids:
            return {}
        result = await self.db.execute(
            select(TenureRecord, College)
            .join(College, College.id == TenureRecord.college_id)
            .where(
                TenureRecord.admin_id.in_(admin_ids),
                TenureRecord.is_active == True
            )
        )
        return {record.admin_id: (record, college) for record, college in result.all()}

    @staticmethod
    def _to_view(admin: Admin, record: Optional[TenureRecord], college: Optional[College]) -> AdminResponse:
        view = AdminResponse(
            id=admin.id,
            username=admin.username,
            email=admin.email,
            full_name=admin.full_name,
            role=admin.role.value,
            permissions=list(admin.permissions or []),
            is_active=admin.is_active,
            last_login=admin.last_login,
            created_at=admin.created_at,
            updated_at=admin.updated_at,
        )
        if record is not None:
            view.assigned_college = CollegeSummary.model_validate(college) if college else None
            view.batch_year = record.batch_year
            view.tenure = TenureInfo(
                start_date=record.start_date,
                end_date=record.end_date,
                is_active=record.is_active,
            )
        return view

    # =====================================================
    # LISTINGS
    # =====================================================

    async def list_all(self, active_only: bool = True) -> List[AdminResponse]:
        query = select(Admin).order_by(Admin.created_at)
        if active_only:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query)
        return await self.describe_many(result.scalars().all())

    async def list_by_role(self, role: AdminRole, active_only: bool = True) -> List[AdminResponse]:
        query = select(Admin).where(Admin.role == role).order_by(Admin.created_at)
        if active_only:
            query = query.where(Admin.is_active == True)
        result = await self.db.execute(query)
        return await self.describe_many(result.scalars().all())

    async def list_by_college(self, college_id: str, active_only: bool = True) -> List[AdminResponse]:
        """
        Admins who govern the college now (active_only=True) or ever did
        (active_only=False), most recent tenure first.
        """
        query = (
            select(Admin, func.max(TenureRecord.start_date).label("latest_start"))
            .join(TenureRecord, TenureRecord.admin_id == Admin.id)
            .where(TenureRecord.college_id == college_id)
            .group_by(Admin.id)
            .order_by(func.max(TenureRecord.start_date).desc())
        )
        if active_only:
            query = query.where(TenureRecord.is_active == True, Admin.is_active == True)
        result = await self.db.execute(query)
        return await self.describe_many(admin for admin, _ in result.all())

    async def list_unassigned(self) -> List[AdminResponse]:
        """Active college admins with no active tenure"""
        has_active_tenure = (
            select(TenureRecord.id)
            .where(
                TenureRecord.admin_id == Admin.id,
                TenureRecord.is_active == True
            )
            .exists()
        )
        result = await self.db.execute(
            select(Admin)
            .where(
                Admin.role == AdminRole.COLLEGE_ADMIN,
                Admin.is_active == True,
                ~has_active_tenure
            )
            .order_by(Admin.created_at)
        )
        return await self.describe_many(result.scalars().all())

    # =====================================================
    # ACCOUNT MAINTENANCE
    # =====================================================

    async def create(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: AdminRole,
        permissions: Optional[List[str]] = None,
    ) -> Admin:
        """Insert an admin without any tenure; flushed so the id is available"""
        await self._ensure_unique(username=username, email=email)

        admin = Admin(
            username=username.strip(),
            email=normalize_email(email),
            password_hash=get_password_hash(password),
            full_name=full_name.strip(),
            role=role,
            permissions=permissions or default_permissions(role),
            is_active=True,
            tenure_is_active=False,
        )
        self.db.add(admin)
        await self.db.flush()
        return admin

    async def update_profile(self, admin_id: str, data: AdminUpdate, timeout: Optional[float] = None) -> Admin:
        changes = data.model_dump(exclude_unset=True)

        async def work() -> Admin:
            admin = await self.get(admin_id)
            if "email" in changes or "username" in changes:
                await self._ensure_unique(
                    username=changes.get("username"),
                    email=changes.get("email"),
                    exclude_id=admin.id,
                )

            if "username" in changes:
                admin.username = changes["username"].strip()
            if "email" in changes:
                admin.email = normalize_email(changes["email"])
            if "full_name" in changes:
                admin.full_name = changes["full_name"].strip()
            if "permissions" in changes:
                admin.permissions = list(changes["permissions"] or [])

            admin.updated_at = utcnow()
            await self.db.flush()
            return admin

        return await run_atomic(
            self.db, work,
            operation="admin.update",
            timeout=timeout,
            translate=translate_admin_integrity,
        )

    async def verify_password(self, admin: Admin, password: str) -> bool:
        return verify_password(password, admin.password_hash)

    async def update_password(self, admin_id: str, new_password: str) -> None:
        password_hash = get_password_hash(new_password)

        async def work() -> None:
            admin = await self.get(admin_id)
            admin.password_hash = password_hash
            admin.updated_at = utcnow()
            await self.db.flush()

        await run_atomic(self.db, work, operation="admin.password")

    async def update_last_login(self, admin: Admin) -> None:
        async def work() -> None:
            admin.last_login = utcnow()
            await self.db.flush()

        await run_atomic(self.db, work, operation="admin.login")

    async def _ensure_unique(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> None:
        if email:
            existing = await self.find_by_email(email, include_inactive=True)
            if existing and existing.id != exclude_id:
                raise DuplicateResourceError("Admin", "email", normalize_email(email))
        if username:
            existing = await self.find_by_username(username, include_inactive=True)
            if existing and existing.id != exclude_id:
                raise DuplicateResourceError("Admin", "username", username.strip())


# Factory function
def get_admin_directory(db: AsyncSession) -> AdminDirectory:
    return AdminDirectory(db, TenureLedger(db))
