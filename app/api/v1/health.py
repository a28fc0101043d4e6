from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness check for the ATS scoring service.")
async def health_check():
    return {"status": "healthy"}
