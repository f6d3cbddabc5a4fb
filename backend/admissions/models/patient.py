"""
Patient and exclusion-list tables.

Key design decisions:
- hospital_id NULL means the patient is on the waitlist
- Exclusions reference hospitals by id, so they always name a real hospital
- Deleting a patient removes their exclusions; deleting a hospital is not supported
"""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from admissions.db.base import Base, TimestampMixin


class PatientRecord(Base, TimestampMixin):
    __tablename__ = "patients"

    id = Column(Uuid, primary_key=True)
    name = Column(String(64), nullable=False)
    hospital_id = Column(Integer, ForeignKey("hospitals.id"), nullable=True, index=True)

    hospital = relationship("HospitalRecord", lazy="selectin")
    exclusions = relationship(
        "PatientExclusion",
        back_populates="patient",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<PatientRecord(id={self.id}, name={self.name}, hospital={self.hospital_id})>"


class PatientExclusion(Base):
    __tablename__ = "patient_disallowed_hospitals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Uuid, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    hospital_id = Column(Integer, ForeignKey("hospitals.id"), nullable=False)

    patient = relationship("PatientRecord", back_populates="exclusions")
    hospital = relationship("HospitalRecord", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("patient_id", "hospital_id", name="uq_patient_disallowed_hospital"),
    )
