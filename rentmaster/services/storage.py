"""Storage service with provider interface (local disk)."""

import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from rentmaster.core.config import get_settings
from rentmaster.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


class StorageProviderInterface(ABC):
    """Abstract interface for storage providers."""

    @abstractmethod
    async def save_object(self, file_key: str, content: bytes) -> None:
        """Persist content under file_key."""
        pass

    @abstractmethod
    def object_path(self, file_key: str) -> Path:
        """Local path for serving an object."""
        pass

    @abstractmethod
    async def verify_object_exists(self, file_key: str) -> bool:
        """Verify an object exists in storage."""
        pass

    @abstractmethod
    async def delete_object(self, file_key: str) -> bool:
        """Delete an object from storage."""
        pass


class LocalStorageProvider(StorageProviderInterface):
    """Files under a single upload directory on local disk."""

    def __init__(self, root: str):
        self.root = Path(root)

    def object_path(self, file_key: str) -> Path:
        # Keys are generated server-side; never let one escape the root
        return self.root / os.path.basename(file_key)

    async def save_object(self, file_key: str, content: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.object_path(file_key).write_bytes(content)

    async def verify_object_exists(self, file_key: str) -> bool:
        return self.object_path(file_key).is_file()

    async def delete_object(self, file_key: str) -> bool:
        path = self.object_path(file_key)
        if path.is_file():
            path.unlink()
            return True
        return False


class StorageService:
    """High-level storage service wrapping provider interface."""

    ALLOWED_EXTENSIONS = {
        ".jpeg",
        ".jpg",
        ".png",
        ".gif",
        ".pdf",
        ".doc",
        ".docx",
        ".txt",
    }

    def __init__(self, provider: StorageProviderInterface, max_size_bytes: int):
        self.provider = provider
        self.max_size_bytes = max_size_bytes

    def generate_file_key(self, filename: str) -> str:
        """Unique key keeping the original extension."""
        return f"{uuid.uuid4()}{Path(filename).suffix.lower()}"

    def validate(self, filename: str, size: int) -> None:
        ext = Path(filename).suffix.lower()
        if ext not in self.ALLOWED_EXTENSIONS:
            raise InvalidInputError("Only images, PDFs, and documents are allowed")
        if size == 0:
            raise InvalidInputError("No file uploaded")
        if size > self.max_size_bytes:
            raise InvalidInputError(
                f"File size exceeds maximum of {self.max_size_bytes // (1024 * 1024)}MB"
            )

    async def store(self, filename: str, content: bytes) -> str:
        """Validate and write an upload. Returns its file key."""
        self.validate(filename, len(content))
        file_key = self.generate_file_key(filename)
        await self.provider.save_object(file_key, content)
        return file_key

    async def discard(self, file_key: str) -> None:
        """Best-effort removal of a stored file."""
        try:
            await self.provider.delete_object(file_key)
        except OSError:
            logger.exception("Could not remove stored file %s", file_key)

    async def exists(self, file_key: str) -> bool:
        return await self.provider.verify_object_exists(file_key)

    def path(self, file_key: str) -> Path:
        return self.provider.object_path(file_key)


def get_storage_service() -> StorageService:
    """Factory function to get storage service based on config."""
    settings = get_settings()
    provider = LocalStorageProvider(settings.upload_dir)
    return StorageService(provider, settings.max_upload_size_bytes)
