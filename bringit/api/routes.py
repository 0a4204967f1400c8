"""
API routes: health, smoke-test endpoints, sample catalogue and docs.
"""
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from bringit import __version__
from bringit.monitoring.health import HealthCheck

from .schemas import (
    ApiDocsResponse,
    ApiTestResponse,
    HealthResponse,
    Pagination,
    ProductListResponse,
    ProductPage,
    SampleProduct,
)

logger = structlog.get_logger(__name__)

api_router = APIRouter(prefix="/api", tags=["api"])
monitoring_router = APIRouter(tags=["monitoring"])

SAMPLE_PRODUCTS = [
    SampleProduct(
        id="1",
        name="Fresh Apples",
        price=2.99,
        category="Fruits",
        image="/images/apples.jpg",
        in_stock=True,
        stock_quantity=50,
    ),
    SampleProduct(
        id="2",
        name="Organic Bananas",
        price=1.99,
        category="Fruits",
        image="/images/bananas.jpg",
        in_stock=True,
        stock_quantity=30,
    ),
    SampleProduct(
        id="3",
        name="Fresh Milk",
        price=3.49,
        category="Daily Essentials",
        image="/images/milk.jpg",
        in_stock=True,
        stock_quantity=25,
    ),
]

ENDPOINTS: Dict[str, Dict[str, str]] = {
    "monitoring": {
        "GET /api/health": "Service and database status",
        "GET /api/health/live": "Liveness probe",
        "GET /api/health/ready": "Dependency readiness (database, Stripe)",
        "GET /api/test": "Smoke test for the API",
        "GET /metrics": "Prometheus metrics",
    },
    "products": {
        "GET /api/products/test": "Sample products served without a database",
    },
    "pages": {
        "GET /about": "Why Choose BringIt?",
        "GET /admin-info": "Admin panel access information",
    },
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def database_status(request: Request) -> str:
    """Connected/Disconnected label for the app's database connection."""
    connection = getattr(request.app.state, "db", None)
    return "Connected" if connection is not None and connection.is_connected else "Disconnected"


@api_router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request) -> Dict[str, Any]:
    """Process is serving; reports database connectivity without failing on it."""
    settings = request.app.state.settings
    logger.debug("health_check_requested")
    return {
        "status": "OK",
        "message": "RB's Grocery Backend is running!",
        "timestamp": _now_iso(),
        "version": __version__,
        "environment": settings.app_env,
        "database": database_status(request),
    }


@api_router.get("/health/live", summary="Liveness probe")
async def liveness(request: Request) -> Dict[str, Any]:
    health_check: HealthCheck = request.app.state.health
    return await health_check.liveness()


@api_router.get("/health/ready", summary="Readiness probe")
async def readiness(request: Request) -> JSONResponse:
    health_check: HealthCheck = request.app.state.health
    result = await health_check.readiness()
    status_code = (
        status.HTTP_200_OK
        if result["status"] == "healthy"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=result)


@api_router.get("/test", response_model=ApiTestResponse, summary="API smoke test")
async def api_test(request: Request) -> Dict[str, Any]:
    return {
        "success": True,
        "message": "Backend API is working!",
        "timestamp": _now_iso(),
        "database": database_status(request),
        "endpoints": {
            "health": "/api/health",
            "docs": "/api/docs",
            "products": "/api/products/test",
            "metrics": "/metrics",
        },
    }


@api_router.get(
    "/products/test",
    response_model=ProductListResponse,
    summary="Sample products",
    description="Fixed catalogue used when no database is connected",
)
async def sample_products() -> ProductListResponse:
    return ProductListResponse(
        data=ProductPage(
            products=SAMPLE_PRODUCTS,
            pagination=Pagination(
                current_page=1,
                total_pages=1,
                total_count=len(SAMPLE_PRODUCTS),
                has_next_page=False,
                has_prev_page=False,
            ),
        )
    )


@api_router.get("/docs", response_model=ApiDocsResponse, summary="API documentation")
async def api_docs() -> Dict[str, Any]:
    return {
        "title": "RB's Grocery Shopping API",
        "version": __version__,
        "description": "API documentation for the grocery shopping application",
        "endpoints": ENDPOINTS,
    }


@monitoring_router.get("/metrics", summary="Prometheus metrics")
async def prometheus_metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
