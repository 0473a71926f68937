"""Archive download endpoint."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from ..services.delivery import DownloadStore
from .deps import get_downloads

router = APIRouter(prefix="/downloads", tags=["downloads"])


@router.get("/{run_id}")
async def download_archive(run_id: str, downloads: DownloadStore = Depends(get_downloads)):
    item = downloads.get(run_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Download not found")
    return Response(
        content=item.data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{item.filename}"'},
    )
