from fastapi import APIRouter

from coursewatcher.api.deps import LibraryDep
from coursewatcher.schemas.video import StatsResponse

router = APIRouter()


@router.get("/", response_model=StatsResponse, name="stats")
async def get_course_stats(library: LibraryDep):
    """Counts per status and overall completion"""
    return library.stats()
