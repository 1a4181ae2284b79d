"""Main FastAPI application"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.events import lifespan
from app.core.exceptions import register_exception_handlers
from app.core.monitoring import setup_monitoring_middleware, setup_health_endpoints
from app.api import router as api_router

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Carts, orders and payments for Medbook patients",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_monitoring_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(api_router)
setup_health_endpoints(app)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=settings.WORKERS
    )
