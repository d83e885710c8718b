from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, or_, select

from coursewatcher.core.exceptions import NotFoundError
from coursewatcher.database import Store
from coursewatcher.models import Module, Video, VideoStatus

# Name shown for videos that sit directly in the course root
ROOT_MODULE_NAME = "Videos"

DEFAULT_SORT = "name"


def video_order(sort_mode: Optional[str] = DEFAULT_SORT) -> list:
    """ORDER BY columns for a sort mode. Unknown modes fall back to 'name'."""
    if sort_mode == "name_desc":
        return [Video.sort_order.desc(), Video.filename.desc()]
    if sort_mode == "date":
        return [Video.created_at.asc(), Video.id.asc()]
    if sort_mode == "date_desc":
        return [Video.created_at.desc(), Video.id.desc()]
    return [Video.sort_order.asc(), Video.filename.asc()]


def _same_module(module_id: Optional[int]):
    # "= NULL" never matches, root videos need IS NULL
    return Video.module_id.is_(None) if module_id is None else Video.module_id == module_id


class LibraryService:
    """Read side: module listing, navigation, search and statistics"""

    def __init__(self, store: Store):
        self.store = store

    @property
    def db(self):
        return self.store.session

    def list_modules_with_videos(self, sort_mode: Optional[str] = DEFAULT_SORT) -> List[Dict[str, Any]]:
        """
        Modules with their videos, root videos first as a pseudo-module.
        sort_mode: 'name' (default), 'name_desc', 'date', 'date_desc'
        """
        order = video_order(sort_mode)
        result = []

        root_videos = self.db.query(Video).filter(Video.module_id.is_(None)).order_by(*order).all()
        if root_videos:
            result.append({
                "id": None,
                "name": ROOT_MODULE_NAME,
                "path": None,
                "sort_order": None,
                "videos": root_videos,
            })

        modules = self.db.query(Module).order_by(Module.sort_order, Module.name).all()
        for module in modules:
            videos = self.db.query(Video).filter(Video.module_id == module.id).order_by(*order).all()
            result.append({
                "id": module.id,
                "name": module.name,
                "path": module.path,
                "sort_order": module.sort_order,
                "videos": videos,
            })

        return result

    def get_by_id(self, video_id: int) -> Video:
        video = self.db.get(Video, video_id)
        if not video:
            raise NotFoundError(f"Video with id {video_id}")
        return video

    def _module_video_ids(self, video: Video) -> List[int]:
        rows = self.store.fetch_all(
            select(Video.id).where(_same_module(video.module_id)).order_by(*video_order())
        )
        return [row.id for row in rows]

    def get_adjacent(self, video_id: int) -> Dict[str, Optional[int]]:
        """Previous and next video ids within the same module"""
        video = self.get_by_id(video_id)
        ids = self._module_video_ids(video)
        index = ids.index(video.id)

        return {
            "prev": ids[index - 1] if index > 0 else None,
            "next": ids[index + 1] if index < len(ids) - 1 else None,
        }

    def get_queue(self, video_id: int) -> List[Video]:
        """Videos that come after this one in its module ("up next")"""
        video = self.get_by_id(video_id)
        videos = self.db.query(Video).filter(_same_module(video.module_id)).order_by(*video_order()).all()
        index = [v.id for v in videos].index(video.id)
        return videos[index + 1:]

    def search(self, query: Optional[str]) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on title and filename"""
        if not query or not query.strip():
            return []

        rows = self.store.fetch_all(
            select(Video, Module.name)
            .outerjoin(Module, Video.module_id == Module.id)
            .where(or_(
                Video.title.icontains(query, autoescape=True),
                Video.filename.icontains(query, autoescape=True),
            ))
            .order_by(*video_order())
        )
        return [self._format_result(video, module_name) for video, module_name in rows]

    @staticmethod
    def _format_result(video: Video, module_name: Optional[str]) -> Dict[str, Any]:
        return {
            "id": video.id,
            "title": video.title,
            "filename": video.filename,
            "path": video.path,
            "duration": video.duration,
            "position": video.position,
            "status": video.status,
            "module_id": video.module_id,
            "module_name": module_name or ROOT_MODULE_NAME,
            "sort_order": video.sort_order,
        }

    def stats(self) -> Dict[str, int]:
        row = self.store.fetch_one(
            select(
                func.count(Video.id).label("total"),
                func.count(case((Video.status == VideoStatus.COMPLETED.value, 1))).label("completed"),
                func.count(case((Video.status == VideoStatus.IN_PROGRESS.value, 1))).label("in_progress"),
            )
        )

        total = row.total or 0
        completed = row.completed or 0
        in_progress = row.in_progress or 0

        return {
            "total": total,
            "completed": completed,
            "in_progress": in_progress,
            # Derived, so the three buckets always add up to total
            "unwatched": total - completed - in_progress,
            # Integer half-up rounding of 100 * completed / total
            "percent_complete": (200 * completed + total) // (2 * total) if total else 0,
        }
