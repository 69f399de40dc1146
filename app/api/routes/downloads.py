"""Download route guarded by the entitlement gate"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ...application.use_cases.download_order_file import DownloadOrderFileUseCase
from ...api.dependencies import get_current_user, get_unit_of_work, get_storage_service
from ...domain.entities.user import User


router = APIRouter(tags=["downloads"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/{order_id}")
async def download_order_file(
    order_id: str,
    current_user: User = Depends(get_current_user),
    unit_of_work = Depends(get_unit_of_work),
    storage_service = Depends(get_storage_service)
):
    """Stream the purchased file and count the download"""
    use_case = DownloadOrderFileUseCase(unit_of_work, storage_service)
    grant = await use_case.execute(order_id, str(current_user.email))

    return FileResponse(
        path=grant.path,
        media_type=grant.media_type,
        filename=grant.filename,
        headers=NO_CACHE_HEADERS,
    )
