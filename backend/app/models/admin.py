from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Integer, JSON, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class AdminRole(str, enum.Enum):
    """Admin roles (values match the persisted strings)"""
    SUPER_ADMIN = "super-admin"
    COLLEGE_ADMIN = "admin"


SUPER_ADMIN_PERMISSIONS = [
    'users.read', 'users.write', 'users.delete',
    'events.read', 'events.write', 'events.delete',
    'colleges.read', 'colleges.write', 'colleges.delete',
    'admins.read', 'admins.write', 'admins.delete',
    'settings.read', 'settings.write',
    'analytics.read', 'system.admin',
]

COLLEGE_ADMIN_PERMISSIONS = [
    'users.read', 'users.write',
    'events.read', 'events.write', 'events.delete',
    'analytics.read',
]


def default_permissions(role: AdminRole) -> list:
    if role == AdminRole.SUPER_ADMIN:
        return list(SUPER_ADMIN_PERMISSIONS)
    return list(COLLEGE_ADMIN_PERMISSIONS)


class Admin(Base):
    """Administrator account with a denormalized snapshot of its active tenure"""
    __tablename__ = "admins"
    __table_args__ = (
        # A super admin never carries a college or batch binding
        CheckConstraint(
            "role != 'super-admin' OR (assigned_college_id IS NULL AND batch_year IS NULL)",
            name="ck_admin_super_admin_unbound",
        ),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-case
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)

    role = Column(
        SQLEnum(AdminRole, name="admin_role", values_callable=lambda roles: [r.value for r in roles]),
        default=AdminRole.COLLEGE_ADMIN,
        nullable=False,
    )
    permissions = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Current tenure snapshot (mirrors the single active TenureRecord, if any)
    assigned_college_id = Column(GUID, ForeignKey("colleges.id"), nullable=True)
    batch_year = Column(Integer, nullable=True)
    tenure_start_date = Column(DateTime, nullable=True)
    tenure_end_date = Column(DateTime, nullable=True)
    tenure_is_active = Column(Boolean, default=False, nullable=False)

    # Timestamps
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    tenure_records = relationship("TenureRecord", back_populates="admin")

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN

    def __repr__(self):
        return f"<Admin {self.username} ({self.role.value if self.role else '-'})>"
