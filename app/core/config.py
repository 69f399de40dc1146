"""Application configuration"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "ModelVault"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Financial model marketplace: orders, downloads and Excel assets"

    # Security
    SECRET_KEY: str = Field(...)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7)
    ALGORITHM: str = "HS256"

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./modelvault.db")

    # Stripe Payment Processing
    STRIPE_SECRET_KEY: str = Field(default="")
    STRIPE_WEBHOOK_SECRET: str = Field(default="")
    STRIPE_API_VERSION: str = Field(default="2023-10-16")

    # CORS
    ALLOWED_HOSTS: list[str] = Field(default=["http://localhost:3000"])

    # Application URLs
    FRONTEND_URL: str = Field(default="http://localhost:3000")

    # Download entitlement
    DOWNLOAD_WINDOW_DAYS: int = Field(default=30)
    MAX_DOWNLOADS: int = Field(default=5)

    # File storage
    PUBLIC_DIR: str = Field(default="public")
    EXCEL_UPLOAD_SUBDIR: str = Field(default="uploads/excel")
    MAX_EXCEL_FILE_SIZE: int = Field(default=100 * 1024 * 1024)  # 100MB
    ALLOWED_EXCEL_EXTENSIONS: list[str] = Field(default=[".xlsx", ".xlsm", ".xls"])
    ALLOWED_EXCEL_TYPES: list[str] = Field(default=[
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel.sheet.macroEnabled.12",
        "application/vnd.ms-excel",
    ])

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: Optional[str] = Field(default=None)

    # Development
    DEBUG: bool = Field(default=False)
    TESTING: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
