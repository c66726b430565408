from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from .base import Base, TimestampMixin
from schoolhub.schemas.enums import NewsCategory, NewsStatus


class NewsPost(TimestampMixin, Base):
    """News article. No school means the post is shown to every school."""
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    author = Column(String(255), nullable=False)
    category = Column(SQLEnum(NewsCategory, name="news_category"), nullable=False)
    status = Column(SQLEnum(NewsStatus, name="news_status"), nullable=False, default=NewsStatus.DRAFT)
    featured = Column(Boolean, nullable=False, default=False)
    image = Column(String(512), nullable=True)
    read_time = Column(Integer, nullable=True)  # minutes
    published_at = Column(DateTime(timezone=True), nullable=True)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)
