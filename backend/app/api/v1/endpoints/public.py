"""
Public endpoints used by the member sign-up flow (no authentication).
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List

from app.api.deps import get_services
from app.schemas.college import CollegeSummary
from app.schemas.member import MemberCreate, MemberResponse
from app.schemas.tenure import BatchValidationResult
from app.services import PortalServices

router = APIRouter()


@router.get("/colleges", response_model=List[CollegeSummary])
async def list_public_colleges(
    services: PortalServices = Depends(get_services)
):
    """Active colleges for the sign-up dropdown"""
    return await services.colleges.list(active_only=True)


@router.get("/validate-batch", response_model=BatchValidationResult)
async def validate_batch(
    college_id: str = Query(...),
    batch_year: str = Query(..., description="Claimed batch year, e.g. 2025"),
    services: PortalServices = Depends(get_services)
):
    """Check that an admin currently governs the batch before the member signs up"""
    return await services.gateway.validate(college_id, batch_year)


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def register_member(
    data: MemberCreate,
    services: PortalServices = Depends(get_services)
):
    return await services.members.register(data)
