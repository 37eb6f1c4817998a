"""
FinManager web console.

Server-rendered admin console on FastAPI and Jinja2. Every page works against
the per-session services: the session middleware loads the session named by
the cookie, builds its services, and saves the session after the response.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from api.query_cache import CacheRegistry
from api.services import build_services
from console.dependencies import LoginRequired
from console.routes import auth, dashboard, employees, expenses, invoices, payouts, settings, subsidiaries
from console.templates import render
from stores.session_store import SessionStore, create_session_store
from utils.error_handling import ApiError, AuthenticationError
from utils.logging_config import TraceContext

logger = logging.getLogger("finmanager.console")

__version__ = "1.0.0"

STATIC_DIR = Path(__file__).resolve().parent / "static"
DEFAULT_COOKIE_NAME = "finmanager_session"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


def create_app(
    config: Dict[str, Any],
    session_store: Optional[SessionStore] = None,
    caches: Optional[CacheRegistry] = None,
    http_session: Optional[requests.Session] = None,
) -> FastAPI:
    """
    Create the console application.

    Args:
        config: Console configuration
        session_store: Session persistence (built from config when None)
        caches: Per-session query caches (built from config when None)
        http_session: requests session shared by all API clients

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title="FinManager Console",
        description="Financial management admin console",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )

    app.state.config = config
    app.state.session_store = session_store or create_session_store(config)
    app.state.caches = caches or CacheRegistry.from_config(config)
    app.state.http_session = http_session or requests.Session()
    cookie_name = config.get("session", {}).get("cookie_name", DEFAULT_COOKIE_NAME)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        """Load the session, trace the request, save the session."""
        if request.url.path.startswith("/static") or request.url.path == "/health":
            return await call_next(request)

        with TraceContext(label=f"{request.method} {request.url.path}"):
            session_store: SessionStore = app.state.session_store
            session = await run_in_threadpool(session_store.load, request.cookies.get(cookie_name))
            request.state.services = build_services(
                config,
                session,
                cache=app.state.caches.for_session(session.session_id),
                http_session=app.state.http_session,
            )
            response = await call_next(request)
            if session.rotated_from:
                app.state.caches.discard(session.rotated_from)
            await run_in_threadpool(session_store.save, session)
            if request.cookies.get(cookie_name) != session.session_id:
                response.set_cookie(
                    cookie_name,
                    session.session_id,
                    max_age=SESSION_COOKIE_MAX_AGE,
                    httponly=True,
                    samesite="lax",
                )
            return response

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        # The session's 401 handler already cleared credentials and queued the toast
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(ApiError)
    def api_error_handler(request: Request, exc: ApiError):
        status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
        return render(
            request,
            "error.html",
            {"error": exc, "title": "Something went wrong"},
            status_code=status_code,
        )

    @app.get("/health")
    def health():
        """Console status."""
        return JSONResponse({
            "status": "ok",
            "service": "finmanager-console",
            "version": __version__,
            "environment": config.get("environment", "unknown"),
            "api_base_url": config.get("api", {}).get("base_url"),
            "mock_login": bool(config.get("auth", {}).get("mock_login", True)),
            "timestamp": datetime.now().isoformat(),
        })

    for module in (auth, dashboard, employees, invoices, expenses, payouts, subsidiaries, settings):
        app.include_router(module.router)

    logger.info(f"Console created for environment {config.get('environment', 'unknown')}")
    return app
