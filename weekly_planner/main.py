"""Main FastAPI application for the weekly planner."""
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weekly_planner import __version__
from weekly_planner.db.init import init_db
from weekly_planner.middleware.cors import add_cors_middleware
from weekly_planner.routers import auth, tasks
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="Weekly Planner API",
    description="Per-week task lists for the weekly planner board",
    version=__version__,
)

add_cors_middleware(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    try:
        init_db()
    except Exception:
        logger.exception("Database initialization failed; requests touching the database will fail")
    logger.info("Application startup complete", version=__version__)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and path parameters are reported as 400 InvalidPayload."""
    problems = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid payload", "problems": problems},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "title": "Weekly Planner API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(auth.router, prefix="/auth")  # /auth/sign-up, /auth/sign-in, /auth/me
app.include_router(tasks.router, prefix="/api")  # /api/tasks/{weekKey}/...


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "weekly_planner.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "4000")),
        reload=os.environ.get("ENVIRONMENT", "development") == "development",
    )
