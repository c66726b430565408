from sqlalchemy import Column, Integer, String, Boolean, Date, Text
from sqlalchemy.orm import relationship
from .base import TenantModel


class Teacher(TenantModel):
    __tablename__ = "teachers"

    username = Column(String(100), nullable=True)
    title = Column(String(20), nullable=True)
    firstname = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    othername = Column(String(100), nullable=True)
    birthday = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    bloodgroup = Column(String(5), nullable=True)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    state = Column(String(100), nullable=True)
    lga = Column(String(100), nullable=True)
    section = Column(String(50), nullable=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    school = relationship("School", back_populates="teachers")
    form_classes = relationship("Class", back_populates="form_master")
    subjects = relationship("Subject", back_populates="teacher")
    lessons = relationship("Lesson", back_populates="teacher")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.firstname, self.othername, self.surname) if part)

    def __repr__(self):
        return f"<Teacher(email={self.email})>"
