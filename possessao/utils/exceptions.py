"""
Custom exceptions for the application
"""


class PossessaoException(Exception):
    """Base exception for the Possessao application"""

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class EntityNotFoundError(PossessaoException):
    """Raised when an entity id is not in the catalog"""

    def __init__(self, entity_id: str):
        super().__init__(
            f"Entity '{entity_id}' not found",
            status_code=404,
            details={"entity_id": entity_id}
        )


class InvalidImageError(PossessaoException):
    """Raised when image is invalid or corrupted"""

    def __init__(self, message: str = "Invalid or corrupted image"):
        super().__init__(message, status_code=400)


class RemoteUnavailableError(PossessaoException):
    """Raised when a remote image service cannot be reached or fails"""

    def __init__(self, message: str = "Remote service unavailable", details: dict = None):
        super().__init__(message, status_code=503, details=details)


class CompositionError(PossessaoException):
    """Raised when a compositing stage fails"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)


class CatalogError(PossessaoException):
    """Raised when the catalog store cannot be read or written"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)


class StorageError(PossessaoException):
    """Raised when storage operation fails"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)


class FileSizeExceededError(PossessaoException):
    """Raised when uploaded file exceeds size limit"""

    def __init__(self, max_size: int):
        message = f"File size exceeds maximum allowed size of {max_size / (1024*1024):.1f}MB"
        super().__init__(message, status_code=413)


class UnsupportedFileTypeError(PossessaoException):
    """Raised when file type is not supported"""

    def __init__(self, extension: str, allowed: list, message: str = None):
        if message is None:
            message = f"File type '{extension}' not supported. Allowed: {', '.join(allowed)}"
        super().__init__(message, status_code=415, details={"allowed": allowed})
