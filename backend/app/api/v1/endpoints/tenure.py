"""
Tenure endpoints: assign, transfer and end admin tenures (super admin only).
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.core.logging_config import logger
from app.modules.auth.dependencies import AdminPrincipal, require_super_admin
from app.schemas.college import TenureRecordResponse
from app.schemas.tenure import (
    AssignTenureRequest,
    TransferTenureRequest,
    EndTenureRequest,
    TenureOperationResponse,
)
from app.services import PortalServices

router = APIRouter()


@router.post("/assign", response_model=TenureRecordResponse)
async def assign_tenure(
    data: AssignTenureRequest,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """Make the admin head of (college, batch year), ending any tenure elsewhere"""
    return await services.coordinator.assign(
        data.admin_id,
        data.college_id,
        batch_year=data.batch_year,
        start_date=data.start_date,
    )


@router.post("/transfer", response_model=TenureRecordResponse)
async def transfer_admin(
    data: TransferTenureRequest,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    if data.transfer_reason:
        logger.info(f"[Tenure] Transfer of {data.admin_id} requested: {data.transfer_reason}")
    return await services.coordinator.transfer_admin(
        data.admin_id,
        data.college_id,
        batch_year=data.batch_year,
    )


@router.post("/end", response_model=TenureOperationResponse)
async def end_tenure(
    data: EndTenureRequest,
    principal: AdminPrincipal = Depends(require_super_admin),
    services: PortalServices = Depends(get_services)
):
    """Idempotent: ending when nothing is active reports changed=false"""
    changed = await services.coordinator.end_tenure(data.admin_id, end_date=data.end_date)
    if data.reason and changed:
        logger.info(f"[Tenure] Ended for {data.admin_id}: {data.reason}")
    return TenureOperationResponse(
        message="Tenure ended successfully" if changed else "Admin has no active tenure",
        changed=changed,
    )
