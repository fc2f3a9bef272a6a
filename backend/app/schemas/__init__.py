# Pydantic schemas
from app.schemas.college import (
    ContactInfo,
    CollegeCreate,
    CollegeUpdate,
    CollegeSummary,
    CollegeResponse,
    TenureHead,
    TenureRecordResponse,
)
from app.schemas.admin import (
    AdminCreate,
    SuperAdminCreate,
    CollegeAdminCreate,
    AdminUpdate,
    AdminResponse,
    AdminListResponse,
    PasswordChange,
    TenureInfo,
)
from app.schemas.tenure import (
    AssignTenureRequest,
    TransferTenureRequest,
    EndTenureRequest,
    TenureOperationResponse,
    BatchValidationResult,
)
from app.schemas.member import MemberCreate, MemberResponse, GovernedMembersResponse
from app.schemas.auth import AdminLogin, Token
