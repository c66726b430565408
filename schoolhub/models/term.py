from sqlalchemy import Column, Integer, String, Date, Enum as SQLEnum
from .base import TenantModel
from schoolhub.schemas.enums import Term, TermStatus


class AcademicTerm(TenantModel):
    """A school term with its calendar; grades refer to the same session and term."""
    __tablename__ = "terms"

    session = Column(String(20), nullable=False)  # e.g. "2024/2025"
    term = Column(SQLEnum(Term, name="term"), nullable=False)
    start = Column(Date, nullable=False)
    end = Column(Date, nullable=False)
    next_term = Column(Date, nullable=True)
    days_open = Column(Integer, nullable=False)
    status = Column(SQLEnum(TermStatus, name="term_status"), nullable=False, default=TermStatus.ACTIVE)

    def __repr__(self):
        return f"<AcademicTerm(session={self.session}, term={self.term})>"
