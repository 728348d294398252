"""Business exceptions raised by services and dependencies.

The API layer maps each of these to an HTTP response in
``report_portal.api.error_handlers``.
"""

from typing import Any, Optional


class PortalException(Exception):
    """Base class for report portal errors"""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Any] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class AdminLoginRequired(PortalException):
    """Raised by the auth gate when the request carries no admin session"""

    def __init__(self, message: str = "Admin login required"):
        super().__init__("LOGIN_REQUIRED", message, status_code=303)


class UploadValidationError(PortalException):
    def __init__(self, message: str):
        super().__init__("VALIDATION_ERROR", message, status_code=400)


class ReportNotFoundError(PortalException):
    def __init__(self, filename: str):
        super().__init__(
            "NOT_FOUND", f"Report not found: {filename}", status_code=404
        )
        self.filename = filename


class ReportStorageError(PortalException):
    """File write or metadata insert failed"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("STORAGE_ERROR", message, status_code=500, details=details)
