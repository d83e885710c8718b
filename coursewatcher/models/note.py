from sqlalchemy import Column, Integer, ForeignKey, Text, DateTime, func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from coursewatcher.database import Base


class Note(Base):
    """Markdown notes, at most one per video"""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    video_id = Column(Integer, ForeignKey("videos.id", ondelete="CASCADE"), unique=True, nullable=False)
    content = Column(Text, default="", server_default="")

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), server_default=func.current_timestamp())
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc),
                        server_default=func.current_timestamp())

    video = relationship("Video", back_populates="note")
