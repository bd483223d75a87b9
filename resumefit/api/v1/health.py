from fastapi import APIRouter

from resumefit.scoring.constants import ALGORITHM_VERSION_V21

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the analysis engine.")
async def health_check():
    return {"status": "healthy", "scoring_version": ALGORITHM_VERSION_V21}
