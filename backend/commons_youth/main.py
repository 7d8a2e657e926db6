"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from commons_youth.config import get_settings
from commons_youth.api.v1 import router as api_v1_router
from commons_youth.services.boundaries import BoundaryCache, build_boundary_source
from commons_youth.services.thai_locations import ThaiLocationCache

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} (boundaries from {settings.BOUNDARY_SOURCE})...")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    description="ทำเนียบกลุ่มเยาวชนและแผนที่กลุ่มรายจังหวัด",
    version="0.1.0",
    lifespan=lifespan,
)

# Loaded lazily on first use; endpoints receive them through dependencies
app.state.boundary_cache = BoundaryCache(build_boundary_source(settings))
app.state.location_cache = ThaiLocationCache(settings.THAI_LOCATIONS_PATH)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
if settings.STORAGE_BACKEND == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.LOCAL_STORAGE_PATH, check_dir=False),
        name="uploads",
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.APP_NAME}
