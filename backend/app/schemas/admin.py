from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List, Union, Literal, Annotated
from datetime import datetime

from app.core.types import coerce_batch_year
from app.schemas.college import CollegeSummary


# ==================== Admin Creation (tagged by role) ====================

class _AdminAccount(BaseModel):
    """Account fields shared by every admin role"""
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=2)
    permissions: Optional[List[str]] = None

    @field_validator("username", "full_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class SuperAdminCreate(_AdminAccount):
    """Global admin. Has no college or batch binding, so those fields are rejected outright."""
    role: Literal["super-admin"]


class CollegeAdminCreate(_AdminAccount):
    """Admin governing one college for one batch year"""
    role: Literal["admin"]
    college_id: str
    batch_year: int

    @field_validator("batch_year", mode="before")
    @classmethod
    def canonical_batch_year(cls, v):
        return coerce_batch_year(v)


AdminCreate = Annotated[Union[SuperAdminCreate, CollegeAdminCreate], Field(discriminator="role")]


class AdminUpdate(BaseModel):
    """Profile fields only; role and tenure change through the tenure endpoints"""
    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = Field(None, min_length=3, max_length=20)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=2)
    permissions: Optional[List[str]] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


# ==================== Admin Views ====================

class TenureInfo(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = False


class AdminResponse(BaseModel):
    """Admin joined with its active tenure and that tenure's college"""
    id: str
    username: str
    email: str
    full_name: str
    role: str
    permissions: List[str]
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    assigned_college: Optional[CollegeSummary] = None
    batch_year: Optional[int] = None
    tenure: TenureInfo = TenureInfo()


class AdminListResponse(BaseModel):
    success: bool = True
    count: int
    admins: List[AdminResponse]
