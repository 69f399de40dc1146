"""Upload DTOs"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel


class UploadedFileDTO(BaseModel):
    original_name: str
    filename: str
    size: int
    path: str
    uploaded_at: datetime
    backup_available: bool
    backup_file: Optional[str] = None


class ExcelUploadResponseDTO(BaseModel):
    success: bool = True
    message: str = "Excel file uploaded successfully"
    file: UploadedFileDTO


class ExcelVersionsDTO(BaseModel):
    base_name: str
    current: Optional[str] = None
    backup: Optional[str] = None
    files: List[str]
