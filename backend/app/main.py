"""DocQuiz FastAPI application entry point."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import catalog, collections, generate, performance
from app.config import get_settings
from app.utils.logging_config import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # Load environment variables from .env before anything else
    load_dotenv()
    configure_logging()
    get_logger("main").info("DocQuiz API starting")
    yield
    get_logger("main").info("DocQuiz API shutting down")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete request bodies are client errors (400), not 422."""
    get_logger("api").info("Rejected invalid request", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Documentation-driven quiz generator - browse the catalog, generate, save and score questions",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Mount routes
    app.include_router(catalog.router)
    app.include_router(generate.router)
    app.include_router(collections.router)
    app.include_router(performance.router)

    @app.get("/")
    async def root():
        """Root endpoint - API info."""
        return {
            "service": "DocQuiz API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                "GET /catalog",
                "POST /generate",
                "GET /collections",
                "POST /collections",
                "GET /collections/{id}",
                "GET /performance",
                "POST /performance",
            ],
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "docquiz-api"}

    return app


app = create_app()
