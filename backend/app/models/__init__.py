# Re-export all models for convenient imports
from app.models.college import College
from app.models.admin import Admin, AdminRole, default_permissions
from app.models.tenure import TenureRecord
from app.models.user import Member

__all__ = [
    # Colleges
    "College",
    # Admins
    "Admin",
    "AdminRole",
    "default_permissions",
    # Tenure ledger
    "TenureRecord",
    # Members
    "Member",
]
