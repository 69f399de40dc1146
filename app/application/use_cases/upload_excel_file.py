"""Excel upload with keep-current-plus-one-backup versioning"""

import logging
import os
from datetime import datetime

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ...core.config import settings
from ...core.exceptions import InvalidInputError, InternalError
from ...infrastructure.external_services.storage_service import (
    ExcelStorageService,
    EmptyFileError,
    FileTooLargeError,
    sanitize_filename,
)
from ..dtos.file_dtos import ExcelUploadResponseDTO, UploadedFileDTO


logger = logging.getLogger(__name__)


def is_excel_upload(filename: str, content_type: str) -> bool:
    extension = os.path.splitext(filename or "")[1].lower()
    return (
        extension in settings.ALLOWED_EXCEL_EXTENSIONS
        or (content_type or "") in settings.ALLOWED_EXCEL_TYPES
    )


class UploadExcelFileUseCase:

    def __init__(self, storage_service: ExcelStorageService):
        self.storage_service = storage_service

    async def execute(self, upload: UploadFile) -> ExcelUploadResponseDTO:
        original_name = os.path.basename(upload.filename or "")
        if not original_name:
            raise InvalidInputError("No file uploaded")
        if not is_excel_upload(original_name, upload.content_type):
            raise InvalidInputError("Invalid file type. Please upload an Excel file (.xlsx, .xls, or .xlsm)")

        base_name = sanitize_filename(original_name)
        try:
            stored = await run_in_threadpool(
                self.storage_service.save_new_generation, upload.file, base_name
            )
        except (FileTooLargeError, EmptyFileError) as e:
            raise InvalidInputError(str(e)) from e
        except OSError as e:
            logger.exception("Upload of %s failed", original_name)
            raise InternalError("File upload failed. Please try again.", detail=str(e)) from e

        logger.info("Upload completed for: %s", original_name)
        logger.info("- New file: %s", stored.filename)
        if stored.backup_available:
            logger.info("- Backup kept: %s", stored.backup_file)
            if stored.deleted:
                logger.info("- Deleted %d old version(s)", len(stored.deleted))
        else:
            logger.info("- No previous versions found (first upload)")

        return ExcelUploadResponseDTO(
            file=UploadedFileDTO(
                original_name=original_name,
                filename=stored.filename,
                size=stored.size,
                path=stored.public_path,
                uploaded_at=datetime.utcnow(),
                backup_available=stored.backup_available,
                backup_file=stored.backup_file,
            )
        )
