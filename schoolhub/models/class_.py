from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import TenantModel


class Class(TenantModel):
    __tablename__ = "classes"
    __table_args__ = (
        UniqueConstraint("school_id", "name", "category", name="uq_classes_school_name_category"),
    )

    name = Column(String(100), nullable=False)  # e.g., "JSS 1"
    category = Column(String(50), nullable=False)  # e.g., "A"
    level = Column(String(50), nullable=True)
    capacity = Column(Integer, nullable=True)
    section = Column(String(50), nullable=True)
    form_master_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True, index=True)

    school = relationship("School", back_populates="classes")
    form_master = relationship("Teacher", back_populates="form_classes")
    students = relationship("Student", back_populates="student_class")
    lessons = relationship("Lesson", back_populates="lesson_class")

    def __repr__(self):
        return f"<Class(name={self.name}, category={self.category})>"
