"""
School Period Timing — daily period template service.
FastAPI entry point.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from periodtiming.core.config import settings
from periodtiming.core.exceptions import register_exception_handlers
from periodtiming.core.logging_config import configure_logging
from periodtiming.core.middleware import RequestLogMiddleware
from periodtiming.routers import period_timing

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Period timing configuration for the school administration console",
    version="1.0.0",
)

# CORS
origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLogMiddleware)

register_exception_handlers(app)

app.include_router(period_timing.router)


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running",
        "store_mode": settings.STORE_MODE,
    }


@app.get("/api/health")
async def health():
    return {"status": "healthy", "store_mode": settings.STORE_MODE}
