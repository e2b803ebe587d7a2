from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
import redis
import uvicorn
import logging
import sys

from nerdiversary.core.config import settings
from nerdiversary.core.database_utils import get_db_session, ping_database
from nerdiversary.core.redis import get_redis_client
from nerdiversary.db.base import Base
from nerdiversary.milestones.api import router as milestones_router
from nerdiversary.milestones.offsets import OffsetTableError, get_offset_table
from nerdiversary.notifications.api import router as push_router
from nerdiversary.notifications.config import settings as push_settings
import nerdiversary.notifications.models  # noqa: F401  (register tables on Base)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting up Nerdiversary push service...")

    # Check database tables
    try:
        with get_db_session() as db:
            existing_tables = inspect(db.bind).get_table_names()
            required_tables = [table.name for table in Base.metadata.tables.values()]
            missing_tables = [table for table in required_tables if table not in existing_tables]
            if missing_tables:
                logger.warning(f"Missing database tables: {missing_tables}")
                logger.warning("Please run the database setup script before starting the server:")
                logger.warning("python scripts/setup_database.py")
            else:
                logger.info("All required database tables exist")
    except SQLAlchemyError as e:
        logger.warning(f"Could not check database tables: {e}")

    # Build the offset table once so the first request does not pay for it
    try:
        table = get_offset_table()
        logger.info(f"✅ [Startup] Offset table ready ({len(table)} offsets)")
    except OffsetTableError as e:
        logger.error(f"❌ [Startup] Offset table build failed: {e}")

    yield

    logger.info("✅ Nerdiversary push service shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Nerdiversary - nerdy anniversary milestones, calendar feeds and push reminders",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS configured for {settings.ENVIRONMENT.value} environment with origins: {settings.allowed_cors_origins}")

    app.include_router(milestones_router, prefix=settings.API_V1_STR, tags=["Milestones"])
    app.include_router(push_router, prefix=f"{settings.API_V1_STR}/push", tags=["Push"])

    if push_settings.METRICS_ENABLED:
        from prometheus_fastapi_instrumentator import Instrumentator

        Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.get("/health", tags=["Health Check"])
    def health_check():
        """Health check endpoint"""
        try:
            with get_db_session() as db:
                ping_database(db)
            db_status = "healthy"
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            db_status = "unhealthy"

        try:
            get_redis_client().ping()
            redis_status = "healthy"
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            redis_status = "unhealthy"

        return {
            "status": "healthy",
            "version": settings.VERSION,
            "project": settings.PROJECT_NAME,
            "database": db_status,
            "redis": redis_status,
        }

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Global HTTP exception handler"""
        logger.error(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": exc.detail,
                "status_code": exc.status_code,
            },
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    uvicorn.run(
        "nerdiversary.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
        log_level="info",
    )
