from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, UniqueConstraint, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from .base import Base, TenantModel, TimestampMixin
from schoolhub.schemas.enums import Term


class Grade(TenantModel):
    """A grading period (session + term) of a school; parent of all recorded results."""
    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("school_id", "session", "term", name="uq_grades_school_session_term"),
    )

    title = Column(String(255), nullable=False)
    session = Column(String(20), nullable=False)  # e.g. "2024/2025"
    term = Column(SQLEnum(Term, name="term"), nullable=False)
    published = Column(Boolean, nullable=False, default=False)
    section = Column(String(50), nullable=True)

    student_grades = relationship("StudentGrade", back_populates="grade")
    report_cards = relationship("ReportCard", back_populates="grade")


class StudentGrade(TimestampMixin, Base):
    __tablename__ = "student_grades"

    id = Column(Integer, primary_key=True, index=True)
    grade_id = Column(Integer, ForeignKey("grades.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    score = Column(Float, nullable=True)
    letter = Column(String(5), nullable=True)
    remark = Column(String(255), nullable=True)

    grade = relationship("Grade", back_populates="student_grades")


class ReportCard(TenantModel):
    __tablename__ = "report_cards"

    grade_id = Column(Integer, ForeignKey("grades.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    total_score = Column(Float, nullable=True)
    average_score = Column(Float, nullable=True)
    position = Column(Integer, nullable=True)
    remark = Column(Text, nullable=True)

    grade = relationship("Grade", back_populates="report_cards")
