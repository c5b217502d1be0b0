from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from .errors import register_exception_handlers
from .repositories import Repository, build_repository
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "home", "description": "Home page and service health."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]

HOME_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Todo</title>
</head>
<body>
  <h1>Todo</h1>
  <p>A small CRUD service over a single todo collection.</p>
  <ul>
    <li><code>GET /todo/</code> list todos</li>
    <li><code>POST /todo/</code> create a todo</li>
    <li><code>PUT /todo/{id}</code> update a todo</li>
    <li><code>DELETE /todo/{id}</code> delete a todo</li>
  </ul>
  <p>API documentation: <a href="/docs">/docs</a></p>
</body>
</html>
"""


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        repository: Storage backend to serve from. When omitted, one is built from
            settings on startup and closed on shutdown. A repository passed in is
            owned by the caller and left open.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.repository is None
        if owned:
            app.state.repository = build_repository(settings)
        logger.info("Todo service ready (backend=%s)", settings.persistence_backend)
        try:
            yield
        finally:
            if owned:
                app.state.repository.close()
                app.state.repository = None
            logger.info("Todo service stopped")

    app = FastAPI(
        title="Todo Service",
        description="CRUD API for todo items stored in a document database.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    register_exception_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/", response_class=HTMLResponse, summary="Home page", tags=["home"])
    def home() -> str:
        """Render the home page."""
        return HOME_PAGE

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health Check", tags=["home"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(todos_router.router)
    return app


app = create_app()
