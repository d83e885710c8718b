from pathlib import Path
from typing import List

from fastapi import APIRouter
from fastapi.responses import FileResponse

from coursewatcher.api.deps import LibraryDep, NotesDep, ProgressDep
from coursewatcher.core.exceptions import NotFoundError
from coursewatcher.schemas.notes import NotesResponse, SaveNotesRequest, SaveNotesResponse
from coursewatcher.schemas.video import (AdjacentResponse, ProgressSummary, UpdateProgressRequest,
                                         UpdateStatusRequest, VideoResponse, VideoUpdateResponse)

router = APIRouter()


@router.get("/{video_id}", response_model=VideoResponse, name="detail")
async def get_video(video_id: int, library: LibraryDep):
    return library.get_by_id(video_id)


@router.get("/{video_id}/adjacent", response_model=AdjacentResponse, name="adjacent")
async def get_adjacent_videos(video_id: int, library: LibraryDep):
    """Previous / next video ids within the same module"""
    return library.get_adjacent(video_id)


@router.get("/{video_id}/queue", response_model=List[VideoResponse], name="queue")
async def get_video_queue(video_id: int, library: LibraryDep):
    """Remaining videos of the module, in playing order"""
    return library.get_queue(video_id)


@router.get("/{video_id}/stream", name="stream")
async def stream_video(video_id: int, library: LibraryDep):
    video = library.get_by_id(video_id)

    if not Path(video.path).is_file():
        raise NotFoundError(f"File for video {video_id}")

    # FileResponse handles Range requests so the player can seek
    return FileResponse(video.path)


@router.get("/{video_id}/progress", response_model=ProgressSummary, name="progress")
async def get_video_progress(video_id: int, service: ProgressDep):
    return service.progress_summary(video_id)


@router.post("/{video_id}/progress", response_model=VideoUpdateResponse, name="update_progress")
async def update_video_progress(video_id: int, request: UpdateProgressRequest, service: ProgressDep):
    """Periodic position report from the player"""
    video = service.record_position(video_id, request.position, request.duration)
    return {"success": True, "video": video}


@router.post("/{video_id}/status", response_model=VideoUpdateResponse, name="update_status")
async def update_video_status(video_id: int, request: UpdateStatusRequest, service: ProgressDep):
    video = service.set_status(video_id, request.status)
    return {"success": True, "video": video}


@router.get("/{video_id}/notes", response_model=NotesResponse, name="notes")
async def get_video_notes(video_id: int, service: NotesDep):
    return service.get(video_id)


@router.post("/{video_id}/notes", response_model=SaveNotesResponse, name="save_notes")
async def save_video_notes(video_id: int, request: SaveNotesRequest, service: NotesDep):
    notes = service.save(video_id, request.content)
    return {"success": True, "notes": notes}


@router.delete("/{video_id}/notes", name="delete_notes")
async def delete_video_notes(video_id: int, service: NotesDep):
    return {"video_id": video_id, "deleted": service.delete(video_id)}
