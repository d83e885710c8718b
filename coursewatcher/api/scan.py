import logging

from fastapi import APIRouter

from coursewatcher.api.deps import ScannerDep
from coursewatcher.schemas.scan import ScanResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", response_model=ScanResponse, name="rescan")
async def rescan_course(scanner: ScannerDep):
    """Re-scan the course folder for new videos"""
    logger.info("Rescan requested")
    return scanner.scan()
