from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Enum as SQLEnum
from .base import Base, TimestampMixin
from schoolhub.schemas.enums import GalleryCategory


class GalleryItem(TimestampMixin, Base):
    __tablename__ = "gallery"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(512), nullable=False)
    category = Column(SQLEnum(GalleryCategory, name="gallery_category"), nullable=False,
                      default=GalleryCategory.GENERAL)
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
