from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, Index, CheckConstraint, text, func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from coursewatcher.database import Base


class VideoStatus(str, enum.Enum):
    UNWATCHED = "unwatched"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list:
        return [s.value for s in cls]


class Video(Base):
    __tablename__ = "videos"

    __table_args__ = (
        CheckConstraint(
            "status IN ('unwatched', 'in-progress', 'completed')",
            name="ck_videos_status"
        ),
        Index('idx_videos_module', 'module_id'),
        Index('idx_videos_status', 'status'),
        Index('idx_videos_path', 'path'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    path = Column(String, unique=True, nullable=False)
    filename = Column(String, nullable=False)
    title = Column(String, nullable=False)

    # Seconds. Duration stays 0 until the player reports it
    duration = Column(Float, default=0, server_default=text("0"))
    position = Column(Float, default=0, server_default=text("0"))
    status = Column(String, default=VideoStatus.UNWATCHED.value,
                    server_default=VideoStatus.UNWATCHED.value, nullable=False)

    # NULL = the video sits directly in the course root
    module_id = Column(Integer, ForeignKey("modules.id", ondelete="SET NULL"), nullable=True)
    sort_order = Column(Integer, default=0, server_default=text("0"))

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), server_default=func.current_timestamp())
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc),
                        server_default=func.current_timestamp())

    module = relationship("Module", back_populates="videos")
    note = relationship("Note", back_populates="video", uselist=False,
                        cascade="all, delete-orphan", passive_deletes=True)

    @property
    def percent_watched(self) -> int:
        if not self.duration or self.duration <= 0:
            return 0
        return round_half_up(self.position / self.duration * 100)


def round_half_up(value: float) -> int:
    """Rounds halves up, unlike round() which rounds them to even"""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
