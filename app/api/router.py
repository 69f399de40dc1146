"""Main API router"""

from fastapi import APIRouter

from .routes import auth, orders, downloads, payments, models, admin
from ..core.config import settings

# Main API router
api_router = APIRouter()

# Include all routes
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(downloads.router, prefix="/download", tags=["downloads"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(models.router, prefix="/models", tags=["models"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])


@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.VERSION}
