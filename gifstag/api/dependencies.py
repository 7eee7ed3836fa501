"""Request dependencies shared by the API routers."""

from fastapi import Request

from gifstag.project import GifProject


def get_project(request: Request) -> GifProject:
    """Returns the project served by this app."""
    return request.app.state.project
