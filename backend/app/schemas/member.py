from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

from app.core.types import coerce_batch_year
from app.schemas.college import CollegeSummary


class MemberCreate(BaseModel):
    full_name: str = Field(..., min_length=2)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    college_id: str
    batch_year: int = Field(..., description="Cohort year; strings of digits are accepted")

    @field_validator("batch_year", mode="before")
    @classmethod
    def canonical_batch_year(cls, v):
        return coerce_batch_year(v)


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    member_id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    college_id: str
    batch_year: int
    is_active: bool
    created_at: datetime


class GovernedMembersResponse(BaseModel):
    """Members of the batch a college admin currently governs"""
    success: bool = True
    college: CollegeSummary
    batch_year: int
    count: int
    members: List[MemberResponse]
