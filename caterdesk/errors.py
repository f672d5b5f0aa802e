"""
Error taxonomy for CaterDesk.

Every failure a controller can surface is a ``CaterDeskException`` carrying a
user-facing message, a stable code and the HTTP status the API maps it to.
"""

from typing import Optional


class CaterDeskException(Exception):
    """Base exception for CaterDesk errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


# =============================================================================
# Client-side validation (raised before any network call)
# =============================================================================

class ValidationError(CaterDeskException):
    """Form input failed client-side validation."""

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            detail=detail,
        )


class SelfDeleteForbidden(CaterDeskException):
    """The signed-in admin tried to delete their own account."""

    def __init__(self):
        super().__init__(
            message="You cannot delete your own account",
            code="SELF_DELETE_FORBIDDEN",
            status_code=403,
        )


class LastAdminForbidden(CaterDeskException):
    """Deleting the row would leave no admin account."""

    def __init__(self):
        super().__init__(
            message="At least one admin account must remain",
            code="LAST_ADMIN_FORBIDDEN",
            status_code=403,
        )


class InvalidFileType(CaterDeskException):
    """Selected file is not an image."""

    def __init__(self, content_type: Optional[str]):
        super().__init__(
            message="Please select an image file",
            code="INVALID_FILE_TYPE",
            status_code=415,
            detail=f"Unsupported content type: {content_type or 'unknown'}",
        )


class FileTooLarge(CaterDeskException):
    """Selected file exceeds the upload limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            message=f"Image must be smaller than {limit // (1024 * 1024)}MB",
            code="FILE_TOO_LARGE",
            status_code=413,
            detail=f"{size} bytes exceeds the {limit} byte limit",
        )


# =============================================================================
# Authentication
# =============================================================================

class InvalidCredentials(CaterDeskException):
    """Login failed. Never distinguishes unknown email from wrong password."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# =============================================================================
# Backend failures
# =============================================================================

class GatewayError(CaterDeskException):
    """Raised by a persistence gateway or blob store."""

    def __init__(self, operation: str, detail: Optional[str] = None):
        self.operation = operation
        super().__init__(
            message=f"Backend {operation} failed",
            code="GATEWAY_ERROR",
            status_code=502,
            detail=detail,
        )


class FetchError(CaterDeskException):
    def __init__(self, entity: str, detail: Optional[str] = None):
        super().__init__(
            message=f"Failed to fetch {entity}",
            code="FETCH_ERROR",
            status_code=502,
            detail=detail,
        )


class SaveError(CaterDeskException):
    def __init__(self, entity: str, detail: Optional[str] = None):
        super().__init__(
            message=f"Failed to save {entity}",
            code="SAVE_ERROR",
            status_code=502,
            detail=detail,
        )


class DeleteError(CaterDeskException):
    def __init__(self, entity: str, detail: Optional[str] = None):
        super().__init__(
            message=f"Failed to delete {entity}",
            code="DELETE_ERROR",
            status_code=502,
            detail=detail,
        )


class UploadError(CaterDeskException):
    """Blob storage rejected or failed the upload."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            message="Failed to upload image",
            code="UPLOAD_ERROR",
            status_code=502,
            detail=detail,
        )


class NotFoundError(CaterDeskException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )
