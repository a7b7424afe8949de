"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from loansewa_web.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loansewa_web.api.pages import admin, borrower, public
from loansewa_web.domain.exceptions import SessionRequired
from loansewa_web.infrastructure.observability.logging import setup_logging
from loansewa_web.infrastructure.observability.metrics import session_redirect_counter
from loansewa_web.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def session_required_handler(request: Request, exc: SessionRequired) -> Response:
    """Send visitors without a session to the matching login page"""
    session_redirect_counter.labels(area=exc.area).inc()
    logging.info(
        "Redirecting to login",
        extra={"request_id": getattr(request.state, "request_id", "unknown"), "path": request.url.path, "area": exc.area},
    )
    return RedirectResponse(exc.login_path, status_code=303)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="LoanSewa Web",
        description="Borrower and admin web front end for the LoanSewa credit API",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(SessionRequired, session_required_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register page routers
    app.include_router(public.router, tags=["public"])
    app.include_router(borrower.router, tags=["borrower"])
    app.include_router(admin.router, tags=["admin"])

    return app


app = create_app()
