from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class College(Base):
    """College model"""
    __tablename__ = "colleges"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    name = Column(String(255), unique=True, nullable=False)
    code = Column(String(10), unique=True, index=True, nullable=False)  # e.g., REC, PES (upper-case)
    location = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)

    # Contact
    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(20), nullable=False)
    website = Column(String(255), nullable=True)

    # Status (soft delete flips this)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    tenure_records = relationship("TenureRecord", back_populates="college")

    def __repr__(self):
        return f"<College {self.code}>"
