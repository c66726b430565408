from sqlalchemy import Column, String, Boolean, Text
from sqlalchemy.orm import relationship
from .base import TenantModel


class Parent(TenantModel):
    __tablename__ = "parents"

    username = Column(String(100), nullable=True)
    title = Column(String(20), nullable=True)
    firstname = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    othername = Column(String(100), nullable=True)
    gender = Column(String(10), nullable=True)
    occupation = Column(String(100), nullable=True)
    religion = Column(String(50), nullable=True)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    state = Column(String(100), nullable=True)
    lga = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    students = relationship("Student", back_populates="parent")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.firstname, self.othername, self.surname) if part)

    def __repr__(self):
        return f"<Parent(email={self.email})>"
