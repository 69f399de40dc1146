"""Admin routes: Excel uploads and catalog maintenance"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from ...application.use_cases.upload_excel_file import UploadExcelFileUseCase
from ...application.use_cases.manage_catalog import CreateCatalogModelUseCase, UpdateCatalogModelUseCase
from ...application.dtos.catalog_dtos import CatalogModelCreateDTO, CatalogModelUpdateDTO, CatalogModelResponseDTO
from ...application.dtos.file_dtos import ExcelUploadResponseDTO, ExcelVersionsDTO
from ...api.dependencies import get_current_admin_user, get_unit_of_work, get_storage_service
from ...domain.entities.user import User
from ...infrastructure.external_services.storage_service import sanitize_filename


router = APIRouter()


@router.post("/excel/upload", response_model=ExcelUploadResponseDTO)
async def upload_excel(
    file: UploadFile = File(...),
    admin_user: User = Depends(get_current_admin_user),
    storage_service = Depends(get_storage_service)
):
    """Upload a new generation of an Excel model"""
    use_case = UploadExcelFileUseCase(storage_service)
    try:
        return await use_case.execute(file)
    finally:
        await file.close()


@router.get("/excel/versions/{base_name}", response_model=ExcelVersionsDTO)
async def list_excel_versions(
    base_name: str,
    admin_user: User = Depends(get_current_admin_user),
    storage_service = Depends(get_storage_service)
):
    """Stored generations of an uploaded file, newest first"""
    base_name = sanitize_filename(base_name)
    files = storage_service.list_generations(base_name)
    return ExcelVersionsDTO(
        base_name=base_name,
        current=files[0] if files else None,
        backup=files[1] if len(files) > 1 else None,
        files=files
    )


@router.post("/models", response_model=CatalogModelResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_model(
    request: CatalogModelCreateDTO,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work = Depends(get_unit_of_work)
):
    """Create a catalog model"""
    return await CreateCatalogModelUseCase(unit_of_work).execute(request)


@router.patch("/models/{slug}", response_model=CatalogModelResponseDTO)
async def update_model(
    slug: str,
    request: CatalogModelUpdateDTO,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work = Depends(get_unit_of_work)
):
    """Update a catalog model, e.g. point excel_url at a fresh upload"""
    return await UpdateCatalogModelUseCase(unit_of_work).execute(slug, request)
