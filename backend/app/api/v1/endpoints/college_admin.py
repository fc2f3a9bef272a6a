"""
College admin endpoints: read access scoped to the batch the caller governs.
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.models.tenure import TenureRecord
from app.modules.auth.dependencies import get_governed_tenure
from app.schemas.college import CollegeSummary
from app.schemas.member import GovernedMembersResponse, MemberResponse
from app.services import PortalServices

router = APIRouter()


@router.get("/members", response_model=GovernedMembersResponse)
async def list_governed_members(
    tenure: TenureRecord = Depends(get_governed_tenure),
    services: PortalServices = Depends(get_services)
):
    """Members of the caller's college and batch year; 403 without an active tenure"""
    college = await services.colleges.get(tenure.college_id)
    members = await services.members.list_by_batch(tenure.college_id, tenure.batch_year)
    return GovernedMembersResponse(
        college=CollegeSummary.model_validate(college),
        batch_year=tenure.batch_year,
        count=len(members),
        members=[MemberResponse.model_validate(m) for m in members],
    )


@router.get("/members/{member_id}", response_model=MemberResponse)
async def get_governed_member(
    member_id: str,
    tenure: TenureRecord = Depends(get_governed_tenure),
    services: PortalServices = Depends(get_services)
):
    return await services.members.get_in_batch(tenure.college_id, tenure.batch_year, member_id)
