"""Document schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import computed_field

from rentmaster.core.config import get_settings
from rentmaster.models.enums import OwnerTable
from rentmaster.schemas.auth import UserBrief
from rentmaster.schemas.base import BaseSchema, IDMixin


class DocumentResponse(BaseSchema, IDMixin):
    """Stored document with its uploader."""

    owner_table: OwnerTable
    owner_id: UUID
    file_key: str
    filename: str
    doc_type: str
    uploaded_by: UUID
    uploaded_at: datetime
    uploaded_user: Optional[UserBrief] = None

    @computed_field
    @property
    def file_url(self) -> str:
        return f"{get_settings().api_prefix}/documents/{self.id}/download"
