# Order service monitoring configuration
# Prometheus metrics, health checks, and logging setup

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any
from sqlalchemy import text
from fastapi import FastAPI, Request, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import settings

# HTTP metrics
request_count = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
request_duration = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])

# Event metrics
outbox_events_published = Counter(
    'outbox_events_published_total',
    'Outbox rows relayed to the event broker',
    ['event_type']
)
order_events_consumed = Counter(
    'order_events_consumed_total',
    'Integration events consumed by the order service',
    ['routing_key', 'outcome']
)

def setup_logging():
    """Configure logging for the application"""

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        handlers=[console_handler],
        force=True,
    )

    # Silence noisy loggers in production
    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

def setup_monitoring_middleware(app: FastAPI):
    """Add monitoring middleware to track metrics"""

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time

        # Label by route template so path parameters don't explode cardinality
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        request_count.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()

        request_duration.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(process_time)

        response.headers["X-Process-Time"] = str(process_time)

        return response

async def get_health_status(db_session) -> Dict[str, Any]:
    """Get health status of the service and its database"""

    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {}
    }

    try:
        start = time.time()
        await db_session.execute(text("SELECT 1"))
        health_status["services"]["database"] = {
            "status": "healthy",
            "response_time_ms": round((time.time() - start) * 1000, 2)
        }
    except Exception as e:
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }
        health_status["status"] = "unhealthy"

    return health_status

def setup_health_endpoints(app: FastAPI):
    """Setup health check and metrics endpoints"""
    from .database import AsyncSessionLocal

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Basic health check endpoint"""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/health/detailed", tags=["Health"])
    async def detailed_health_check():
        """Health check including the database"""
        async with AsyncSessionLocal() as session:
            return await get_health_status(session)

    if settings.PROMETHEUS_ENABLED:
        @app.get("/metrics", tags=["Health"])
        async def metrics():
            """Prometheus metrics endpoint"""
            return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
