from sqlalchemy import Column, Integer, String, DateTime, text, func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from coursewatcher.database import Base


class Module(Base):
    """A folder of videos directly under the course root"""
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    path = Column(String, unique=True, nullable=False)
    sort_order = Column(Integer, default=0, server_default=text("0"))

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), server_default=func.current_timestamp())

    videos = relationship("Video", back_populates="module", passive_deletes=True)
