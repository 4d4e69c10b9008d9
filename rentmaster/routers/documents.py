"""Documents router - uploads attached to leases and payments."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import get_db
from rentmaster.core.security import AuthenticatedUser, client_ip, get_current_user, require_manager
from rentmaster.models.enums import OwnerTable
from rentmaster.schemas.document import DocumentResponse
from rentmaster.services.documents import DocumentService
from rentmaster.services.storage import StorageService, get_storage_service

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> DocumentService:
    return DocumentService(db, storage)


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    owner_table: Optional[OwnerTable] = None,
    owner_id: Optional[UUID] = None,
    service: DocumentService = Depends(get_document_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List documents newest first, optionally for one owner."""
    documents = await service.list_documents(owner_table=owner_table, owner_id=owner_id)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    owner_table: OwnerTable = Form(...),
    owner_id: UUID = Form(...),
    doc_type: str = Form(...),
    service: DocumentService = Depends(get_document_service),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Upload a file and attach it to a lease or a payment.

    Allowed: images, PDFs and text/Word documents up to MAX_UPLOAD_SIZE_MB.
    """
    content = await file.read()
    document = await service.upload(
        filename=file.filename or "upload",
        content=content,
        owner_table=owner_table,
        owner_id=owner_id,
        doc_type=doc_type,
        actor=current_user,
        ip_address=client_ip(request),
    )
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get document metadata."""
    return DocumentResponse.model_validate(await service.get(document_id))


@router.get("/{document_id}/download")
async def download_document(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Stream the stored file under its original name."""
    document = await service.get(document_id)
    if not await service.storage.exists(document.file_key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(
        service.storage.path(document.file_key),
        filename=document.filename,
    )


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    request: Request,
    service: DocumentService = Depends(get_document_service),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Delete a document and its stored file."""
    await service.delete(document_id, current_user, client_ip(request))
