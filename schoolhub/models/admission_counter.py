from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from .base import Base


class AdmissionCounter(Base):
    """Last admission sequence issued per school per year."""
    __tablename__ = "admission_counters"
    __table_args__ = (
        UniqueConstraint("school_id", "year", name="uq_admission_counters_school_year"),
    )

    id = Column(Integer, primary_key=True)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    value = Column(Integer, nullable=False, default=0)
