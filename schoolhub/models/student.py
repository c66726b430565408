from sqlalchemy import Column, Integer, String, Date, ForeignKey, Boolean, Text
from sqlalchemy.orm import relationship
from .base import TenantModel


class Student(TenantModel):
    __tablename__ = "students"

    username = Column(String(100), nullable=True)
    firstname = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    othername = Column(String(100), nullable=True)
    birthday = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    religion = Column(String(50), nullable=True)
    bloodgroup = Column(String(5), nullable=True)
    house = Column(String(50), nullable=True)
    student_type = Column(String(50), nullable=True)  # e.g. 'Day', 'Boarding'
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    state = Column(String(100), nullable=True)
    lga = Column(String(100), nullable=True)
    section = Column(String(50), nullable=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    admission_date = Column(Date, nullable=True)
    admission_number = Column(String(50), unique=True, nullable=False)

    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("parents.id"), nullable=False, index=True)

    student_class = relationship("Class", back_populates="students")
    school = relationship("School", back_populates="students")
    parent = relationship("Parent", back_populates="students")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.firstname, self.othername, self.surname) if part)

    def __repr__(self):
        return f"<Student(admission_number={self.admission_number})>"
