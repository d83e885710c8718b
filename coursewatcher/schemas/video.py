from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional


# --- Responses ---
class VideoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    path: str
    filename: str
    title: str
    duration: float = 0
    position: float = 0
    status: str
    module_id: Optional[int] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ModuleResponse(BaseModel):
    """A module and its videos. id is None for the root pseudo-module"""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str
    path: Optional[str] = None
    sort_order: Optional[int] = None
    videos: List[VideoResponse]


class AdjacentResponse(BaseModel):
    prev: Optional[int] = None
    next: Optional[int] = None


class SearchResultItem(BaseModel):
    id: int
    title: str
    filename: str
    path: str
    duration: float
    position: float
    status: str
    module_id: Optional[int] = None
    module_name: str
    sort_order: int


class ProgressSummary(BaseModel):
    video_id: int
    position: float
    duration: float
    status: str
    percent_watched: int


class StatsResponse(BaseModel):
    total: int
    completed: int
    in_progress: int
    unwatched: int
    percent_complete: int


class VideoUpdateResponse(BaseModel):
    success: bool = True
    video: VideoResponse


# --- Requests ---
# Values are checked by the services so bad input surfaces as a 400, not a schema error
class UpdateProgressRequest(BaseModel):
    # Kept raw: lax float parsing would turn "120" or true into a number
    position: Any = None
    duration: Any = None


class UpdateStatusRequest(BaseModel):
    status: Optional[str] = None
