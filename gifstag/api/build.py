"""Build endpoints - inline previews and GIF downloads."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from gifstag.exceptions import EncodeFailure
from gifstag.project import BuildMode, BuildResult, BuildStatus, GifProject

from .dependencies import get_project

router = APIRouter(prefix="/build", tags=["build"])


async def _run_build(project: GifProject, mode: BuildMode) -> BuildResult:
    try:
        return await project.build(mode)
    except EncodeFailure as e:
        raise HTTPException(status_code=502, detail=e.user_message)


def _status_response(result: BuildResult) -> JSONResponse | None:
    """Responses for builds which produced no GIF."""
    if result.status == BuildStatus.EMPTY:
        return JSONResponse(
            content={"status": result.status.value, "message": result.message},
            status_code=200,
        )
    if result.status == BuildStatus.SUPERSEDED:
        return JSONResponse(
            content={
                "status": result.status.value,
                "message": "A newer build was started",
            },
            status_code=409,
        )
    return None


@router.post("/preview")
async def build_preview(project: GifProject = Depends(get_project)):
    """Render the GIF and return it inline as data URL."""
    result = await _run_build(project, BuildMode.PREVIEW)
    response = _status_response(result)
    if response is not None:
        return response
    gif = result.gif
    return {
        "status": result.status.value,
        "width": gif.width,
        "height": gif.height,
        "frame_count": gif.frame_count,
        "duration_seconds": gif.duration_seconds,
        "size_bytes": gif.size_bytes,
        "data_url": gif.to_data_url(),
    }


@router.post("/export")
async def build_export(project: GifProject = Depends(get_project)):
    """Render the GIF and return it as file download."""
    result = await _run_build(project, BuildMode.EXPORT)
    response = _status_response(result)
    if response is not None:
        return response
    return Response(
        content=result.gif.data,
        media_type=result.gif.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )
