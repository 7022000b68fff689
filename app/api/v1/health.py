from fastapi import APIRouter, Request

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    controller = getattr(request.app.state, "controller", None)
    return {
        "status": "healthy",
        "session_ready": controller is not None,
    }
