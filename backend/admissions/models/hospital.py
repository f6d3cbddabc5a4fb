"""
Hospital reference table.

Key design decisions:
- Hospitals are seeded by migration; the service never creates or deletes them
- The roster is not stored here: a patient is on a hospital's roster exactly
  when patients.hospital_id points at it
- Names are unique; lookups compare lower(name) so uniqueness is case-insensitive
"""

from sqlalchemy import Column, Integer, String, Index, func
from admissions.db.base import Base


class HospitalRecord(Base):
    __tablename__ = "hospitals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False, unique=True)

    __table_args__ = (
        Index("ix_hospitals_name_lower", func.lower(name), unique=True),
    )

    def __repr__(self) -> str:
        return f"<HospitalRecord(id={self.id}, name={self.name})>"
