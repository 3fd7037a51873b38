import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from astro_assistant.config import check_gateway_key, settings

logger = logging.getLogger(__name__)
from astro_assistant.routes import chat, health
from astro_assistant.providers.gateway import AIGatewayProvider
from astro_assistant.utils.exceptions import APIError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle events"""
    check_gateway_key()

    # Tests may install their own provider before startup
    if getattr(app.state, "provider", None) is None:
        app.state.provider = AIGatewayProvider.from_settings()
    logger.info(f"Astro Assistant using model '{app.state.provider.model}'")

    yield

    # Shutdown: Cleanup resources
    await app.state.provider.cleanup()


app = FastAPI(
    title="Astro Assistant API",
    description="Streaming chat assistant for the astrology booking site",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware (the booking site is served from another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"error": "Invalid request"})


# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(chat.router, prefix="/api", tags=["chat"])


def run():
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
