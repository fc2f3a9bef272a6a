"""
College endpoints.
Reads are open to any admin; changes require a super admin.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from app.api.deps import get_services
from app.core.exceptions import CollegeNotFoundError
from app.modules.auth.dependencies import AdminPrincipal, get_current_principal, require_super_admin
from app.schemas.admin import AdminListResponse
from app.schemas.college import (
    CollegeCreate,
    CollegeUpdate,
    CollegeResponse,
    TenureHead,
    TenureRecordResponse,
)
from app.services import PortalServices

router = APIRouter()


@router.get("", response_model=List[CollegeResponse])
async def list_colleges(
    search: Optional[str] = Query(None, min_length=1),
    active_only: bool = True,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    """Colleges with their current heads, ordered by name"""
    if search:
        return await services.colleges.search(search)
    return await services.colleges.list(active_only=active_only)


@router.post("", response_model=CollegeResponse, status_code=status.HTTP_201_CREATED)
async def create_college(
    data: CollegeCreate,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    college = await services.colleges.create(data)
    return await services.colleges.describe(college)


@router.get("/code/{code}", response_model=CollegeResponse)
async def get_college_by_code(
    code: str,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    college = await services.colleges.find_by_code(code)
    if college is None:
        raise CollegeNotFoundError(code)
    return await services.colleges.describe(college)


@router.get("/{college_id}", response_model=CollegeResponse)
async def get_college(
    college_id: str,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    return await services.colleges.get_view(college_id)


@router.put("/{college_id}", response_model=CollegeResponse)
async def update_college(
    college_id: str,
    data: CollegeUpdate,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    college = await services.colleges.update(college_id, data)
    return await services.colleges.describe(college)


@router.delete("/{college_id}")
async def delete_college(
    college_id: str,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """Soft delete; refused while any tenure at the college is active"""
    await services.colleges.delete(college_id)
    return {"success": True, "message": "College deleted successfully"}


@router.get("/{college_id}/heads", response_model=List[TenureHead])
async def get_current_heads(
    college_id: str,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    await services.colleges.get(college_id)
    return await services.colleges.current_heads(college_id)


@router.get("/{college_id}/history", response_model=List[TenureRecordResponse])
async def get_tenure_history(
    college_id: str,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    return await services.colleges.tenure_history(college_id)


@router.get("/{college_id}/admins", response_model=AdminListResponse)
async def list_college_admins(
    college_id: str,
    active_only: bool = True,
    principal: AdminPrincipal = Depends(get_current_principal),
    services: PortalServices = Depends(get_services)
):
    """Current heads, or everyone who ever headed the college with active_only=false"""
    await services.colleges.get(college_id)
    admins = await services.directory.list_by_college(college_id, active_only=active_only)
    return AdminListResponse(count=len(admins), admins=admins)
