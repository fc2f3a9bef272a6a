from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.core.types import coerce_batch_year


def _optional_batch_year(v):
    if v is None or v == "":
        return None
    return coerce_batch_year(v)


class AssignTenureRequest(BaseModel):
    admin_id: str
    college_id: str
    batch_year: Optional[int] = None
    start_date: Optional[datetime] = None

    @field_validator("batch_year", mode="before")
    @classmethod
    def canonical_batch_year(cls, v):
        return _optional_batch_year(v)


class TransferTenureRequest(BaseModel):
    admin_id: str
    college_id: str
    batch_year: Optional[int] = None
    transfer_reason: Optional[str] = Field(None, max_length=500)

    @field_validator("batch_year", mode="before")
    @classmethod
    def canonical_batch_year(cls, v):
        return _optional_batch_year(v)


class EndTenureRequest(BaseModel):
    admin_id: str
    end_date: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=500)


class TenureOperationResponse(BaseModel):
    success: bool = True
    message: str
    changed: bool = True


class BatchValidationResult(BaseModel):
    """Outcome of checking a claimed (college, batch year) against the active roster"""
    valid: bool
    admin_name: Optional[str] = None
    error: Optional[str] = None
