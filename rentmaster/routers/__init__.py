"""API Routers for RentMaster."""

from rentmaster.routers.auth import router as auth_router
from rentmaster.routers.properties import router as properties_router
from rentmaster.routers.tenants import router as tenants_router
from rentmaster.routers.leases import router as leases_router
from rentmaster.routers.payments import router as payments_router
from rentmaster.routers.documents import router as documents_router
from rentmaster.routers.dashboard import router as dashboard_router

__all__ = [
    "auth_router",
    "properties_router",
    "tenants_router",
    "leases_router",
    "payments_router",
    "documents_router",
    "dashboard_router",
]
