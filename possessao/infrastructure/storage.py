"""
Storage layer for composited results
"""
from pathlib import Path
from typing import Optional
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import uuid4

from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import StorageError

logger = get_logger(__name__)


class StorageBackend(ABC):
    """Abstract storage backend"""

    @abstractmethod
    def save(self, file_path: str, content: bytes) -> str:
        """Save file and return a reference usable by load/delete"""
        pass

    @abstractmethod
    def load(self, file_path: str) -> bytes:
        """Load file content"""
        pass

    @abstractmethod
    def delete(self, file_path: str) -> None:
        """Delete file"""
        pass

    @abstractmethod
    def exists(self, file_path: str) -> bool:
        """Check if file exists"""
        pass


class LocalStorage(StorageBackend):
    """Local filesystem storage"""

    def __init__(self, base_dir: Optional[str] = None):
        """
        Initialize local storage

        Args:
            base_dir: Base directory for storage (uses config if None)
        """
        self.base_dir = Path(base_dir or settings.OUTPUT_DIR)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalStorage initialized: {self.base_dir}")

    def _get_full_path(self, file_path: str) -> Path:
        """Resolve a path and make sure it stays inside base_dir"""
        candidate = Path(file_path)
        full_path = candidate if candidate.is_absolute() else self.base_dir / candidate
        try:
            full_path.resolve().relative_to(self.base_dir.resolve())
        except ValueError:
            raise StorageError(f"Invalid file path: {file_path}")
        return full_path

    def save(self, file_path: str, content: bytes) -> str:
        """Save file and return its absolute path"""
        full_path = self._get_full_path(file_path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(content)
        except OSError as e:
            raise StorageError(f"Failed to save file: {e}")

        logger.info(f"Saved file: {full_path}")
        return str(full_path.resolve())

    def load(self, file_path: str) -> bytes:
        full_path = self._get_full_path(file_path)
        if not full_path.exists():
            raise StorageError(f"File not found: {file_path}")
        try:
            return full_path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to load file: {e}")

    def delete(self, file_path: str) -> None:
        try:
            full_path = self._get_full_path(file_path)
            if full_path.exists():
                full_path.unlink()
                logger.info(f"Deleted file: {full_path}")
        except (OSError, StorageError) as e:
            logger.error(f"Failed to delete file: {e}")

    def exists(self, file_path: str) -> bool:
        try:
            return self._get_full_path(file_path).exists()
        except StorageError:
            return False


class StorageService:
    """High-level storage service"""

    def __init__(self, backend: Optional[StorageBackend] = None):
        self.backend = backend or LocalStorage()
        logger.info(f"StorageService initialized with backend: {type(self.backend).__name__}")

    def save_result(self, content: bytes, prefix: str = "possessed", extension: str = ".jpg") -> str:
        """
        Save a composited image under a unique name

        Args:
            content: Encoded image bytes
            prefix: File name prefix
            extension: File extension including the dot

        Returns:
            Storage reference of the saved file
        """
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        file_name = f"{prefix}_{timestamp}_{uuid4().hex[:8]}{extension}"
        return self.backend.save(file_name, content)

    def delete_file(self, file_path: str) -> None:
        self.backend.delete(file_path)


# Global storage service instance
_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get storage service instance (singleton)"""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
