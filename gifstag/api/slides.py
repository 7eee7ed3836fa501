"""Slide endpoints - upload, list, edit, reorder and delete slides."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from gifstag.config import settings
from gifstag.project import GifProject
from gifstag.slide import TransitionKind

from .dependencies import get_project

router = APIRouter(prefix="/slides", tags=["slides"])


class SlideUpdate(BaseModel):
    """Partial slide update, omitted fields stay untouched."""

    effect: Optional[TransitionKind] = None
    duration_seconds: Optional[float] = Field(
        default=None, ge=1, le=settings.MAX_DURATION_SECONDS
    )
    caption: Optional[str] = None
    caption_style: Optional[dict[str, Any]] = None


class MoveRequest(BaseModel):
    """Moves a slide to a new position."""

    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


def _sequence_dict(project: GifProject) -> dict:
    return {
        "slides": [slide.to_api_dict() for slide in project.slides],
        "canvas": {"width": project.canvas.width, "height": project.canvas.height},
        "total_duration_seconds": project.total_duration_seconds,
    }


@router.get("")
async def list_slides(project: GifProject = Depends(get_project)) -> dict:
    """List all slides in display order."""
    return _sequence_dict(project)


@router.post("")
async def upload_slides(
    files: list[UploadFile] = File(...),
    project: GifProject = Depends(get_project),
) -> dict:
    """Append uploaded images as new slides.

    Files which can not be decoded are listed in `errors`, all others are
    added in upload order.
    """
    items = [(upload.filename, await upload.read()) for upload in files]
    outcomes = await project.add_images(items)
    result = _sequence_dict(project)
    result["added"] = sum(1 for outcome in outcomes if outcome.ok)
    result["errors"] = [
        {"name": outcome.name, "message": outcome.message}
        for outcome in outcomes
        if not outcome.ok
    ]
    return result


@router.patch("/{index}")
async def edit_slide(
    index: int,
    update: SlideUpdate,
    project: GifProject = Depends(get_project),
) -> dict:
    """Merge changes into a slide."""
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    try:
        slide = project.edit(index, **changes)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return slide.to_api_dict()


@router.post("/move")
async def move_slide(
    request: MoveRequest,
    project: GifProject = Depends(get_project),
) -> dict:
    """Move a slide, keeping the order of all others."""
    try:
        project.move(request.from_index, request.to_index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _sequence_dict(project)


@router.delete("/{index}")
async def delete_slide(index: int, project: GifProject = Depends(get_project)) -> dict:
    """Remove a single slide. The canvas size is kept."""
    try:
        project.remove(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _sequence_dict(project)


@router.delete("")
async def clear_slides(project: GifProject = Depends(get_project)) -> dict:
    """Remove all slides and reset the canvas size."""
    project.clear()
    return _sequence_dict(project)
