"""ASGI entry point for the settlement service (`opcost_gateway.api.main:app`)"""

from fastapi import APIRouter, FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from opcost_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from opcost_gateway.api.v1 import settlement, rollover, rent_roll
from opcost_gateway.infrastructure.observability.logging import setup_logging
from opcost_gateway.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = (
    (settlement.router, "settlements"),
    (rollover.router, "rollover"),
    (rent_roll.router, "rent-roll"),
)


def _operational_router() -> APIRouter:
    """Liveness and Prometheus scrape endpoints, kept outside /v1"""
    router = APIRouter(tags=["operations"])

    @router.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @router.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return router


def create_app() -> FastAPI:
    """Build the settlement API with tracing, metrics and all v1 routes"""
    app = FastAPI(
        title="Operating Cost Settlement Gateway",
        description="Yearly operating cost apportionment among tenants",
        version="0.1.0",
    )

    # RequestIDMiddleware is outermost
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(_operational_router())
    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
