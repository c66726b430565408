from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint, Enum as SQLEnum
from .base import Base, TimestampMixin
from schoolhub.schemas.enums import AdminRole


class Administration(TimestampMixin, Base):
    """Super, management and admin accounts. Only super accounts may lack a school."""
    __tablename__ = "administrations"
    __table_args__ = (
        UniqueConstraint("school_id", "username", name="uq_administrations_school_username"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(AdminRole, name="admin_role"), nullable=False, default=AdminRole.ADMIN)
    section = Column(String(50), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    avatar = Column(String(512), nullable=True)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="SET NULL"), nullable=True, index=True)

    def __repr__(self):
        return f"<Administration(username={self.username}, role={self.role})>"
