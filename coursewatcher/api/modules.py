from typing import Annotated, List

from fastapi import APIRouter, Query

from coursewatcher.api.deps import LibraryDep
from coursewatcher.schemas.video import ModuleResponse

router = APIRouter()


@router.get("/", response_model=List[ModuleResponse], name="list")
async def list_modules(
        library: LibraryDep,
        sort: Annotated[str, Query(description="name | name_desc | date | date_desc")] = "name",
):
    """All modules with their videos. The root pseudo-module comes first."""
    return library.list_modules_with_videos(sort)
