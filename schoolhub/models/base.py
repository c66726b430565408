# base.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, declared_attr
from sqlalchemy.sql import func

Base = declarative_base()


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class TenantModel(TimestampMixin, Base):
    """
    A base for multi-tenant rows.
    This ensures models have a school_id foreign key.
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)

    @declared_attr
    def school_id(cls):
        return Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
