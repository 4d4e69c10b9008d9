"""Document upload, listing and removal."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentmaster.core.errors import InvalidInputError, NotFoundError
from rentmaster.core.security import AuthenticatedUser
from rentmaster.models.document import Document
from rentmaster.models.enums import OwnerTable
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment
from rentmaster.services.audit import AuditService, snapshot
from rentmaster.services.storage import StorageService

logger = logging.getLogger(__name__)

OWNER_MODELS = {
    OwnerTable.LEASES: (Lease, "Lease"),
    OwnerTable.PAYMENTS: (Payment, "Payment"),
}


class DocumentService:
    """Documents attached to leases or payments.

    The file is written before the row; if anything fails afterwards the
    stored file is removed so no orphan is left on disk.
    """

    def __init__(self, db: AsyncSession, storage: StorageService):
        self.db = db
        self.storage = storage

    async def list_documents(
        self,
        owner_table: Optional[OwnerTable] = None,
        owner_id: Optional[UUID] = None,
    ) -> list[Document]:
        query = select(Document).options(selectinload(Document.uploaded_user))
        if owner_table:
            query = query.where(Document.owner_table == owner_table)
        if owner_id:
            query = query.where(Document.owner_id == owner_id)
        result = await self.db.execute(query.order_by(Document.uploaded_at.desc()))
        return list(result.scalars().all())

    async def get(self, document_id: UUID) -> Document:
        result = await self.db.execute(
            select(Document)
            .options(selectinload(Document.uploaded_user))
            .where(Document.id == document_id)
            .execution_options(populate_existing=True)
        )
        document = result.scalar_one_or_none()
        if not document:
            raise NotFoundError("Document")
        return document

    async def upload(
        self,
        filename: str,
        content: bytes,
        owner_table: OwnerTable,
        owner_id: UUID,
        doc_type: str,
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ) -> Document:
        file_key = await self.storage.store(filename, content)
        try:
            if len(doc_type.strip()) < 2:
                raise InvalidInputError("doc_type must be at least 2 characters")

            model, entity = OWNER_MODELS[owner_table]
            if not await self.db.get(model, owner_id):
                raise NotFoundError(entity)

            document = Document(
                owner_table=owner_table,
                owner_id=owner_id,
                file_key=file_key,
                filename=filename,
                doc_type=doc_type.strip(),
                uploaded_by=actor.db_user_id,
            )
            self.db.add(document)
            await self.db.flush()
            await AuditService(self.db).log_create("documents", document, actor, ip_address)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await self.storage.discard(file_key)
            raise

        logger.info("Document uploaded: %s by %s", filename, actor.email)
        return await self.get(document.id)

    async def delete(
        self,
        document_id: UUID,
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ) -> None:
        document = await self.get(document_id)
        old_data = snapshot(document)

        await self.db.delete(document)
        await AuditService(self.db).log_delete(
            "documents", old_data, document_id, actor, ip_address
        )
        await self.db.commit()
        await self.storage.discard(document.file_key)

        logger.info("Document deleted: %s by %s", document.filename, actor.email)
