from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from app.core.database import get_db
from app.core.logging_config import set_admin_id
from app.core.security import decode_token
from app.models.admin import Admin, AdminRole
from app.models.tenure import TenureRecord
from app.services.tenure_ledger import TenureLedger

security = HTTPBearer()


@dataclass(frozen=True)
class AdminPrincipal:
    """Trusted identity handed to the core once the bearer token checks out"""
    admin_id: str
    role: AdminRole

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> AdminPrincipal:
    """Resolve the bearer token to an active admin"""

    token = credentials.credentials
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    admin_id = payload.get("sub")
    if not admin_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    try:
        uuid.UUID(admin_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin ID format"
        )

    result = await db.execute(
        select(Admin).where(Admin.id == admin_id)
    )
    admin = result.scalar_one_or_none()

    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found"
        )

    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin account is inactive"
        )

    set_admin_id(admin.id)
    return AdminPrincipal(admin_id=admin.id, role=admin.role)


async def require_super_admin(
    principal: AdminPrincipal = Depends(get_current_principal)
) -> AdminPrincipal:
    """Only super admins manage colleges, admins and tenures"""
    if not principal.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required"
        )
    return principal


async def get_governed_tenure(
    principal: AdminPrincipal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
) -> TenureRecord:
    """The (college, batch year) the calling college admin currently governs"""
    tenure = await TenureLedger(db).find_active_by_admin(principal.admin_id)
    if tenure is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No college assignment found"
        )
    return tenure
