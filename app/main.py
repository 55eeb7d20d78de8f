from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.config import Settings, settings as default_settings
from app.core.rate_limit import RateLimiter
from scenario_generation.errors import GENERATION_FAILED, InputError, ScenarioServiceError
from scenario_generation.gemini_client import GeminiGenerator, TextGenerator
from scenario_generation.scenario_pipeline import ScenarioPipeline
from utils.logger import get_logger

logger = get_logger("main")


def create_app(settings: Optional[Settings] = None, generator: Optional[TextGenerator] = None) -> FastAPI:
    """
    Builds the API from an explicit Settings value.
    `generator` replaces the Gemini client (tests pass a fake).
    """
    settings = settings or default_settings

    logger.info("Starting server...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.scenario_pipeline = ScenarioPipeline(generator or GeminiGenerator.from_settings(settings))
    app.state.rate_limiter = RateLimiter(
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
    )

    allowed_origins = settings.allowed_origins

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Registered after CORSMiddleware so it runs first
    @app.middleware("http")
    async def reject_unknown_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and origin not in allowed_origins:
            logger.warning(f"Blocked by CORS: {origin}")
            return JSONResponse(
                status_code=403,
                content={"error": "CORS policy violation", "kind": "cors_violation", "origin": origin},
            )
        return await call_next(request)

    @app.exception_handler(ScenarioServiceError)
    async def scenario_error_handler(request: Request, exc: ScenarioServiceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind}: {exc.summary} {exc.details or ''}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(e.get("type") == "json_invalid" for e in errors):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON syntax", "kind": "invalid_json"})
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ()) if p != "body") for e in errors)
        err = InputError(f"Invalid value for: {fields}", summary="Invalid request body")
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": GENERATION_FAILED, "kind": "internal_error", "details": str(exc)},
        )

    from app.routers import scenarios
    app.include_router(scenarios.router, prefix="/api/scenarios", tags=["Scenarios"])

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "API is running..."

    @app.get("/api/health")
    def health_check():
        return {
            "status": "healthy",
            "project": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
        }

    logger.info(f"API Key: {'Loaded' if settings.GEMINI_API_KEY else 'MISSING!'}")
    logger.info(f"Allowed origins: {', '.join(allowed_origins)}")
    logger.info(f"Port: {settings.PORT}")

    return app


app = create_app()
