from sqlalchemy import Column, String, Integer, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class School(TimestampMixin, Base):
    """
    School model. This is the root of the tenant hierarchy.
    """
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, index=True)

    # Basic information
    name = Column(String(255), nullable=False, unique=True)
    subtitle = Column(String(255), nullable=True)
    school_type = Column(String(50), nullable=True)  # e.g. 'Primary', 'Secondary'
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    logo = Column(String(512), nullable=True)

    # Contact person
    contact_person = Column(String(255), nullable=True)
    contact_person_email = Column(String(255), nullable=True)
    contact_person_phone = Column(String(20), nullable=True)

    facebook = Column(String(255), nullable=True)
    youtube = Column(String(255), nullable=True)

    # Admission number format
    reg_number_prepend = Column(String(20), nullable=True)
    reg_number_append = Column(String(20), nullable=True)

    classes = relationship("Class", back_populates="school", passive_deletes=True)
    students = relationship("Student", back_populates="school", passive_deletes=True)
    teachers = relationship("Teacher", back_populates="school", passive_deletes=True)

    def __repr__(self):
        return f"<School(name={self.name})>"
