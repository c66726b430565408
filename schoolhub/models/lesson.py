from sqlalchemy import Column, Integer, String, ForeignKey, Time, Enum as SQLEnum
from sqlalchemy.orm import relationship
from .base import TenantModel
from schoolhub.schemas.enums import Weekday


class Lesson(TenantModel):
    __tablename__ = "lessons"

    name = Column(String(100), nullable=False)
    day = Column(SQLEnum(Weekday, name="weekday"), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)

    lesson_class = relationship("Class", back_populates="lessons")
    subject = relationship("Subject", back_populates="lessons")
    teacher = relationship("Teacher", back_populates="lessons")
