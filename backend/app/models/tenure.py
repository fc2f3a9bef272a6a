from sqlalchemy import (
    Column, Boolean, DateTime, Integer, ForeignKey, Index, CheckConstraint, UniqueConstraint, text
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class TenureRecord(Base):
    """
    One admin governing one college for one batch year.

    Rows are never deleted. Ending a tenure flips is_active and stamps end_date.
    The partial unique indexes guarantee, at the storage level, a single active
    head per (college, batch year) and a single active tenure per admin.
    """
    __tablename__ = "college_tenure_heads"
    __table_args__ = (
        UniqueConstraint("admin_id", "college_id", name="uq_tenure_admin_college"),
        CheckConstraint(
            "(is_active AND end_date IS NULL) OR (NOT is_active AND end_date IS NOT NULL)",
            name="ck_tenure_active_open_ended",
        ),
        Index(
            "uq_tenure_active_college_batch",
            "college_id", "batch_year",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index(
            "uq_tenure_active_admin",
            "admin_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    college_id = Column(GUID, ForeignKey("colleges.id"), nullable=False, index=True)
    admin_id = Column(GUID, ForeignKey("admins.id"), nullable=False, index=True)
    batch_year = Column(Integer, nullable=False)

    start_date = Column(DateTime, nullable=False, default=utcnow)
    end_date = Column(DateTime, nullable=True)  # null while the tenure is open
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    college = relationship("College", back_populates="tenure_records")
    admin = relationship("Admin", back_populates="tenure_records")

    def __repr__(self):
        state = "active" if self.is_active else "ended"
        return f"<TenureRecord admin={self.admin_id} college={self.college_id} batch={self.batch_year} {state}>"
