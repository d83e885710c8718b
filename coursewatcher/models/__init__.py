# Import all models here so SQLAlchemy can set up relationships
from coursewatcher.models.module import Module
from coursewatcher.models.video import Video, VideoStatus
from coursewatcher.models.note import Note

__all__ = ['Module', 'Video', 'VideoStatus', 'Note']
