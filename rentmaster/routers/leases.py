"""Leases router."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import get_db
from rentmaster.core.security import AuthenticatedUser, client_ip, get_current_user, require_manager
from rentmaster.models.enums import LeaseStatus, OwnerTable
from rentmaster.schemas.detail import LeaseDetailResponse
from rentmaster.schemas.document import DocumentResponse
from rentmaster.schemas.lease import LeaseCreate, LeaseResponse, LeaseTerminate, LeaseUpdate
from rentmaster.services.documents import DocumentService
from rentmaster.services.leasing import LeaseService
from rentmaster.services.storage import StorageService, get_storage_service

router = APIRouter(prefix="/leases", tags=["leases"])


@router.get("", response_model=List[LeaseResponse])
async def list_leases(
    status: Optional[LeaseStatus] = None,
    tenant_id: Optional[UUID] = None,
    local_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List leases newest first with tenant, unit and property."""
    leases = await LeaseService(db, current_user).list_leases(
        status=status, tenant_id=tenant_id, local_id=local_id
    )
    return [LeaseResponse.model_validate(lease) for lease in leases]


@router.get("/{lease_id}", response_model=LeaseDetailResponse)
async def get_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get a lease with payments and attached documents."""
    lease = await LeaseService(db, current_user).get(lease_id, with_payments=True)
    documents = await DocumentService(db, storage).list_documents(
        owner_table=OwnerTable.LEASES, owner_id=lease_id
    )

    lease_data = LeaseDetailResponse.model_validate(lease)
    lease_data.documents = [DocumentResponse.model_validate(doc) for doc in documents]
    return lease_data


@router.post("", response_model=LeaseResponse, status_code=status.HTTP_201_CREATED)
async def create_lease(
    data: LeaseCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Create an ACTIVE lease on an AVAILABLE local.

    400 when the local is not available, already leased, or the reference
    is taken; 404 when the tenant or local does not exist.
    """
    lease = await LeaseService(db, current_user, client_ip(request)).create(data)
    return LeaseResponse.model_validate(lease)


@router.put("/{lease_id}", response_model=LeaseResponse)
async def update_lease(
    lease_id: UUID,
    data: LeaseUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Update lease terms. Setting status TERMINATED frees the local."""
    lease = await LeaseService(db, current_user, client_ip(request)).update(lease_id, data)
    return LeaseResponse.model_validate(lease)


@router.post("/{lease_id}/terminate", response_model=LeaseResponse)
async def terminate_lease(
    lease_id: UUID,
    request: Request,
    data: Optional[LeaseTerminate] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Terminate an ACTIVE lease; its local becomes AVAILABLE."""
    lease = await LeaseService(db, current_user, client_ip(request)).terminate(
        lease_id, data or LeaseTerminate()
    )
    return LeaseResponse.model_validate(lease)
