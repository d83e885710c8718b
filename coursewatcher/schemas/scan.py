from pydantic import BaseModel, Field
from typing import List


class SkippedFolder(BaseModel):
    path: str
    reason: str


class ScanResponse(BaseModel):
    total: int
    added: int
    already_present: int
    skipped: List[SkippedFolder] = Field(default_factory=list)
