from datetime import datetime, timezone
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert

from coursewatcher.core.exceptions import NotFoundError, ValidationError
from coursewatcher.database import Store
from coursewatcher.models import Note, Video


class NotesService:
    """Per-video Markdown notes"""

    def __init__(self, store: Store):
        self.store = store

    @property
    def db(self):
        return self.store.session

    def _ensure_video(self, video_id: int):
        if not self.db.get(Video, video_id):
            raise NotFoundError(f"Video with id {video_id}")

    def get(self, video_id: int) -> dict:
        """Notes for a video; an empty record if nothing was saved yet"""
        self._ensure_video(video_id)

        note = self.db.query(Note).filter(Note.video_id == video_id).first()

        if not note:
            return {"video_id": video_id, "content": "", "created_at": None, "updated_at": None}

        return {
            "video_id": note.video_id,
            "content": note.content or "",
            "created_at": note.created_at,
            "updated_at": note.updated_at,
        }

    def save(self, video_id: int, content: str) -> dict:
        if not isinstance(content, str):
            raise ValidationError("Notes content must be a string")

        self._ensure_video(video_id)

        now = datetime.now(timezone.utc)
        stmt = insert(Note).values(
            video_id=video_id,
            content=content,
            created_at=now,
            updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Note.video_id],
            set_={"content": stmt.excluded.content, "updated_at": now}
        )
        self.store.mutate(stmt)

        return self.get(video_id)

    def delete(self, video_id: int) -> bool:
        """True if a notes record was actually removed"""
        result = self.store.mutate(delete(Note).where(Note.video_id == video_id))
        return result.rowcount > 0

    def videos_with_notes(self) -> List[dict]:
        rows = self.store.fetch_all(
            select(Video, Note.content)
            .join(Note, Note.video_id == Video.id)
            .where(Note.content != "")
            .order_by(Video.sort_order, Video.filename)
        )
        return [{"video": video, "notes_content": content} for video, content in rows]
