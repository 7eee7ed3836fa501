"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from gifstag.project import GifProject

from .build import router as build_router
from .slides import router as slides_router

VERSION = "0.1.0"

api_router = APIRouter()


@api_router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION}


api_router.include_router(slides_router)
api_router.include_router(build_router)


def create_api_app(project: GifProject | None = None) -> FastAPI:
    """
    Creates the API app serving a single project.

    :param project: The project to serve, a new empty one if None
    :return: The app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.project.close()

    app = FastAPI(title="GifStag", version=VERSION, lifespan=lifespan)
    app.state.project = project or GifProject()
    app.include_router(api_router)
    return app
