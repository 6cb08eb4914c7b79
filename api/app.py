"""
Data Structures Assistant API Server

One-route FastAPI proxy in front of the hosted chat-completion provider.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api import __version__
from api.chat_routes import router as chat_router
from api.models import HealthResponse
from config.app_config import get_config
from utils.logging_config import get_logger, initialize_logging


logger = get_logger(__name__)


# =============================================================================
# App Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle handler."""
    config = get_config()
    logger.info(
        f"Chat API server v{__version__} starting "
        f"(model={config.llm.model}, environment={config.environment})"
    )
    yield
    logger.info("Chat API server shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    initialize_logging()

    app = FastAPI(
        title="Data Structures Assistant API",
        description="Chat-completion proxy for the Data Structures Assistant UI",
        version=__version__,
        lifespan=lifespan,
    )

    _register_error_handlers(app)
    _register_health_routes(app)
    app.include_router(chat_router)

    return app


# =============================================================================
# Error Handlers
# =============================================================================

def _register_error_handlers(app: FastAPI):
    """Malformed request bodies answer 400 with an error field."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))

        logger.info(f"Rejected malformed request to {request.url.path}: {problems}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body: " + "; ".join(problems), "error_type": "validation"},
        )


# =============================================================================
# Health Routes
# =============================================================================

def _register_health_routes(app: FastAPI):
    """Register health check endpoints."""

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            model=get_config().llm.model,
        )


# Create the app instance
app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: Optional[bool] = None,
):
    """Run the API server."""
    import uvicorn

    server = get_config().server
    uvicorn.run(
        "api.app:app",
        host=host or server.host,
        port=port or server.port,
        reload=server.reload if reload is None else reload,
    )


if __name__ == "__main__":
    run_server()
