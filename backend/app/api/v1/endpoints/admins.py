"""
Admin management endpoints (super admin only).
"""
from fastapi import APIRouter, Body, Depends, status
from typing import Annotated, List, Optional, Union

from app.api.deps import get_services
from app.core.exceptions import AdminNotFoundError
from app.models.admin import AdminRole
from app.modules.auth.dependencies import AdminPrincipal, require_super_admin
from app.schemas.admin import (
    SuperAdminCreate,
    CollegeAdminCreate,
    AdminUpdate,
    AdminResponse,
    AdminListResponse,
)
from app.schemas.college import CollegeSummary, TenureRecordResponse
from app.services import PortalServices

router = APIRouter()


@router.get("", response_model=AdminListResponse)
async def list_admins(
    role: Optional[AdminRole] = None,
    active_only: bool = True,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    if role is not None:
        admins = await services.directory.list_by_role(role, active_only=active_only)
    else:
        admins = await services.directory.list_all(active_only=active_only)
    return AdminListResponse(count=len(admins), admins=admins)


@router.get("/unassigned", response_model=AdminListResponse)
async def list_unassigned_admins(
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """College admins without an active tenure"""
    admins = await services.directory.list_unassigned()
    return AdminListResponse(count=len(admins), admins=admins)


@router.post("", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: Annotated[Union[SuperAdminCreate, CollegeAdminCreate], Body(discriminator="role")],
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """
    Create an admin. `role: "admin"` requires college_id and batch_year and
    assigns the tenure in the same transaction; `role: "super-admin"` rejects both.
    """
    admin = await services.coordinator.register_admin(data)
    return await services.directory.describe(admin)


@router.get("/{admin_id}", response_model=AdminResponse)
async def get_admin(
    admin_id: str,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    return await services.directory.get_view(admin_id)


@router.put("/{admin_id}", response_model=AdminResponse)
async def update_admin(
    admin_id: str,
    data: AdminUpdate,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    admin = await services.directory.update_profile(admin_id, data)
    return await services.directory.describe(admin)


@router.delete("/{admin_id}")
async def deactivate_admin(
    admin_id: str,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """Soft delete; any active tenure is ended first"""
    await services.coordinator.deactivate_admin(admin_id)
    return {"success": True, "message": "Admin deactivated successfully"}


@router.get("/{admin_id}/history", response_model=List[TenureRecordResponse])
async def get_admin_tenure_history(
    admin_id: str,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    admin = await services.directory.find_by_id(admin_id, include_inactive=True)
    if admin is None:
        raise AdminNotFoundError(admin_id)
    return await services.ledger.find_history_by_admin(admin_id)


@router.get("/{admin_id}/colleges", response_model=List[CollegeSummary])
async def get_admin_colleges(
    admin_id: str,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """Colleges the admin has headed, most recent first"""
    await services.directory.get(admin_id)
    return await services.colleges.colleges_by_admin(admin_id)
