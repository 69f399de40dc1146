"""Download entitlement gate"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ...core.exceptions import AppError, NotFoundError, FileUnavailableError, InternalError
from ...domain.entities.catalog_model import CatalogModel
from ...domain.entities.order import Order
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId
from ...infrastructure.external_services.storage_service import ExcelStorageService


logger = logging.getLogger(__name__)

DENIED_MESSAGE = "Order not found or download not available"
SPREADSHEET_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def media_type_for(path: Path) -> str:
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return SPREADSHEET_MEDIA_TYPE
    return "application/octet-stream"


def download_filename(model_title: str, extension: str) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", model_title or "") or "download"
    return f"{stem}{extension}"


@dataclass(frozen=True)
class DownloadGrant:
    path: Path
    filename: str
    media_type: str
    order: Order


class DownloadOrderFileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, storage_service: ExcelStorageService):
        self.unit_of_work = unit_of_work
        self.storage_service = storage_service

    async def execute(self, raw_order_id: str, caller_email: str) -> DownloadGrant:
        try:
            order_id = OrderId.from_str(raw_order_id)
        except ValueError:
            raise NotFoundError(DENIED_MESSAGE)

        now = datetime.utcnow()
        try:
            async with self.unit_of_work:
                entitled = await self.unit_of_work.orders.get_downloadable(order_id, caller_email, now)
                if entitled is None:
                    await self._log_denial(order_id, caller_email, now)
                    raise NotFoundError(DENIED_MESSAGE)

                order, catalog_model = entitled
                path = self._resolve_asset(catalog_model)
                if path is None:
                    # The customer gets nothing, so the attempt is not counted
                    logger.error("File not found for order %s (model %s)", order_id, order.model_slug)
                    raise FileUnavailableError()

                updated = await self.unit_of_work.orders.increment_download_count(order_id, now)
                if updated is None:
                    logger.info("Download slot for order %s taken by a concurrent request", order_id)
                    raise NotFoundError(DENIED_MESSAGE)

                await self.unit_of_work.commit()
        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.exception("Download failed for order %s", order_id)
            raise InternalError("Download failed", detail=str(e)) from e

        logger.info(
            "File downloaded by %s: Order %s, Downloads: %d/%d",
            caller_email, order_id, updated.download_count, updated.max_downloads
        )
        return DownloadGrant(
            path=path,
            filename=download_filename(updated.model_title, path.suffix),
            media_type=media_type_for(path),
            order=updated,
        )

    def _resolve_asset(self, catalog_model: Optional[CatalogModel]) -> Optional[Path]:
        if catalog_model is None:
            return None
        for url in catalog_model.asset_candidates():
            path = self.storage_service.resolve_public_path(url)
            if path is not None:
                return path
        return None

    async def _log_denial(self, order_id: OrderId, caller_email: str, now: datetime) -> None:
        order = await self.unit_of_work.orders.get_by_id(order_id)
        reason = order.denial_reason(caller_email, now) if order else "missing"
        logger.info("Download denied for %s on order %s: %s", caller_email, order_id, reason)
