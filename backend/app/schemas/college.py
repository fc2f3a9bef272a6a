from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime


# ==================== College Schemas ====================

class ContactInfo(BaseModel):
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)
    website: Optional[str] = None


class ContactInfoUpdate(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=20)
    website: Optional[str] = None


class CollegeCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=2, max_length=10, description="Short code like REC, PES")
    location: str = Field(..., min_length=2)
    address: str = Field(..., min_length=2)
    contact_info: ContactInfo

    @field_validator("name", "code", "location", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class CollegeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    code: Optional[str] = Field(None, min_length=2, max_length=10)
    location: Optional[str] = None
    address: Optional[str] = None
    contact_info: Optional[ContactInfoUpdate] = None


class CollegeSummary(BaseModel):
    """Compact college reference embedded in admin views"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    location: str


class TenureHead(BaseModel):
    """One currently active tenure at a college"""
    tenure_id: str
    admin_id: str
    admin_name: str
    admin_email: str
    batch_year: int
    start_date: datetime


class CollegeResponse(BaseModel):
    id: str
    name: str
    code: str
    location: str
    address: str
    contact_info: ContactInfo
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    current_heads: List[TenureHead] = []


class TenureRecordResponse(BaseModel):
    """Ledger row as exposed to callers"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    college_id: str
    admin_id: str
    batch_year: int
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool
