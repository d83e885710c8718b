from typing import Annotated

from fastapi import Depends, Request

from coursewatcher.services.library import LibraryService
from coursewatcher.services.notes import NotesService
from coursewatcher.services.progress import ProgressService
from coursewatcher.services.scanner import CourseScanner


# Services are built once in the lifespan and parked on app.state
def get_library_service(request: Request) -> LibraryService:
    return request.app.state.library


def get_progress_service(request: Request) -> ProgressService:
    return request.app.state.progress


def get_notes_service(request: Request) -> NotesService:
    return request.app.state.notes


def get_scanner(request: Request) -> CourseScanner:
    return request.app.state.scanner


LibraryDep = Annotated[LibraryService, Depends(get_library_service)]
ProgressDep = Annotated[ProgressService, Depends(get_progress_service)]
NotesDep = Annotated[NotesService, Depends(get_notes_service)]
ScannerDep = Annotated[CourseScanner, Depends(get_scanner)]
