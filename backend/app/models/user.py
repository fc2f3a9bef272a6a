from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Index

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Member(Base):
    """Organization member registered under a college and batch year"""
    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_college_batch", "college_id", "batch_year"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    member_id = Column(String(20), unique=True, index=True, nullable=False)  # e.g. MEM0001
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-case
    phone = Column(String(20), nullable=True)

    college_id = Column(GUID, ForeignKey("colleges.id"), nullable=False)
    batch_year = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Member {self.member_id} {self.email}>"
