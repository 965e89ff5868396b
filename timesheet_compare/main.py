"""
Main FastAPI application for the timesheet comparison service
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
import logging
import logging.config

from timesheet_compare.config import settings, validate_settings
from timesheet_compare.database import Base, engine
from timesheet_compare import models  # noqa: F401  registers tables on Base.metadata
from timesheet_compare.api import attendance, comparison, suspect_days, timesheets
from timesheet_compare.services.timesheet_store import TimesheetCache

# Configure logging
logging.config.dictConfig(settings.get_logging_config())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application on startup"""
    logger.info("Starting Timesheet Compare service")
    validate_settings()

    # In production, use Alembic migrations instead
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    yield

    logger.info("Shutting down Timesheet Compare service")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Timesheet Compare",
        description="Reconciles spreadsheet timesheets with recorded attendance and commits reviewed edits",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # The import cache belongs to this app instance and is invalidated after every write
    app.state.timesheet_cache = TimesheetCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        """Health check endpoint for monitoring"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            return {
                "status": "healthy",
                "database": "connected",
                "version": "1.0.0"
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            raise HTTPException(status_code=503, detail="Service unavailable")

    for router in (comparison.router, attendance.router, timesheets.router, suspect_days.router):
        app.include_router(router, prefix=settings.API_PREFIX)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    # Development server
    uvicorn.run(
        "timesheet_compare.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
