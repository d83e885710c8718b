import logging
import math
from numbers import Real
from typing import Optional

from coursewatcher.config import Settings, settings as default_settings
from coursewatcher.core.exceptions import NotFoundError, ValidationError
from coursewatcher.database import Store
from coursewatcher.models import Video, VideoStatus

# Position updates may only move a video forward along this order
_STATUS_RANK = {
    VideoStatus.UNWATCHED.value: 0,
    VideoStatus.IN_PROGRESS.value: 1,
    VideoStatus.COMPLETED.value: 2,
}


def _is_number(value) -> bool:
    # bool is an int subclass, but "true" is not a playback position
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def derive_status(current: str, position: float, duration: float, threshold: float) -> str:
    """
    Status implied by a playback position.
    Never returns a status "below" the current one; only set_status() can go back.
    """
    derived = current

    if duration > 0:
        if position / duration >= threshold:
            derived = VideoStatus.COMPLETED.value
        elif position > 0:
            derived = VideoStatus.IN_PROGRESS.value
    elif position > 0 and current == VideoStatus.UNWATCHED.value:
        derived = VideoStatus.IN_PROGRESS.value

    if _STATUS_RANK.get(derived, 0) < _STATUS_RANK.get(current, 0):
        return current
    return derived


class ProgressService:
    """Playback position and watch status of videos"""

    def __init__(self, store: Store, settings: Settings = default_settings):
        self.store = store
        self.completion_threshold = settings.completion_threshold
        self.logger = logging.getLogger(__name__)

    @property
    def db(self):
        return self.store.session

    def _get_video(self, video_id: int) -> Video:
        video = self.db.get(Video, video_id)
        if not video:
            raise NotFoundError(f"Video with id {video_id}")
        return video

    def record_position(self, video_id: int, position: float, duration: Optional[float] = None) -> Video:
        """
        Save the player position and derive the status from it.
        A positive duration replaces the stored one; anything else keeps it.
        """
        if not _is_number(position) or position < 0:
            raise ValidationError("Position must be a non-negative number")
        if duration is not None and not _is_number(duration):
            raise ValidationError("Duration must be a number")

        video = self._get_video(video_id)

        if duration is not None and duration > 0:
            video.duration = float(duration)

        effective_duration = video.duration or 0
        new_status = derive_status(video.status, position, effective_duration, self.completion_threshold)

        if new_status != video.status:
            self.logger.debug(f"Video {video_id}: {video.status} -> {new_status} at {position}s")

        video.position = float(position)
        video.status = new_status

        self.store.commit()
        return video

    def set_status(self, video_id: int, status: str) -> Video:
        """Set the status by hand. Going back to 'unwatched' also rewinds to 0."""
        if status not in VideoStatus.values():
            raise ValidationError(
                f"Invalid status. Must be one of: {', '.join(VideoStatus.values())}"
            )

        video = self._get_video(video_id)
        status = VideoStatus(status).value

        if status == VideoStatus.UNWATCHED.value:
            video.position = 0

        video.status = status
        self.store.commit()
        return video

    def mark_completed(self, video_id: int) -> Video:
        return self.set_status(video_id, VideoStatus.COMPLETED.value)

    def mark_unwatched(self, video_id: int) -> Video:
        return self.set_status(video_id, VideoStatus.UNWATCHED.value)

    def progress_summary(self, video_id: int) -> dict:
        video = self._get_video(video_id)

        return {
            "video_id": video.id,
            "position": video.position,
            "duration": video.duration,
            "status": video.status,
            "percent_watched": video.percent_watched,
        }
