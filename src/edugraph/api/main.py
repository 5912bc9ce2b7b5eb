"""FastAPI application for the edugraph API.

Hosts one interactive graph session per process, driven over HTTP by a
video player front end.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edugraph.api.routes import router
from edugraph.config import settings
from edugraph.interaction import GraphSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    logger.info("Starting edugraph API...")
    logger.info(
        f"Viewport {settings.viewport_width:.0f}x{settings.viewport_height:.0f}, "
        f"activation window {settings.activation_window}s"
    )

    app.state.session = GraphSession()

    yield

    logger.info("Shutting down edugraph API...")
    simulation = app.state.session.simulation
    if simulation is not None:
        simulation.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="edugraph",
        description="Interactive concept graph for lecture videos",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "edugraph.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
