from datetime import datetime
from pydantic import BaseModel
from typing import Optional


class NotesResponse(BaseModel):
    video_id: int
    content: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SaveNotesRequest(BaseModel):
    content: Optional[str] = None


class SaveNotesResponse(BaseModel):
    success: bool = True
    notes: NotesResponse
