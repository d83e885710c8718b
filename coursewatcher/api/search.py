from typing import Annotated, List

from fastapi import APIRouter, Query

from coursewatcher.api.deps import LibraryDep
from coursewatcher.schemas.video import SearchResultItem

router = APIRouter()


@router.get("/", response_model=List[SearchResultItem], name="search")
async def search_videos(library: LibraryDep, q: Annotated[str, Query()] = ""):
    """Search titles and filenames. An empty query returns nothing."""
    return library.search(q)
