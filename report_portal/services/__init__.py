"""Service layer: credentials, sessions, file storage and report metadata."""

from report_portal.services.credentials import CredentialStore, hash_password
from report_portal.services.file_store import LocalReportFileStore
from report_portal.services.report_service import ReportService
from report_portal.services.session_store import SessionStore

__all__ = [
    "CredentialStore",
    "LocalReportFileStore",
    "ReportService",
    "SessionStore",
    "hash_password",
]
