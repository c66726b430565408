from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import TenantModel


class Subject(TenantModel):
    __tablename__ = "subjects"

    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=True)
    section = Column(String(50), nullable=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True, index=True)

    teacher = relationship("Teacher", back_populates="subjects")
    lessons = relationship("Lesson", back_populates="subject")
