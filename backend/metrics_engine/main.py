import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from metrics_engine.config import get_settings
from metrics_engine.database import engine, Base
from metrics_engine.exceptions import InvalidWindow, StoreUnavailable

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables on startup
    async with engine.begin() as conn:
        # Import all models to register them with Base
        from metrics_engine import models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Metrics engine started", extra={"environment": settings.environment})
    yield
    # Cleanup on shutdown
    await engine.dispose()


app = FastAPI(
    title="Health Metrics Engine API",
    description="Composite scores, trends, zones and metric contexts over daily health records",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidWindow)
async def invalid_window_handler(request: Request, exc: InvalidWindow) -> JSONResponse:
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=exc.to_dict())


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}


# API routers
from metrics_engine.api.v1.router import api_router

app.include_router(api_router, prefix="/api/v1")
