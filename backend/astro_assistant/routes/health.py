from fastapi import APIRouter, Request


router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check endpoint"""
    provider = request.app.state.provider

    return {
        "status": "healthy",
        "model": provider.model,
        "gateway_configured": provider.is_configured(),
    }
