"""Service dependencies.

Everything is built per request from objects the app factory places on
``app.state``; nothing here holds module-level state.
"""

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.config import AppConfig
from report_portal.services.credentials import CredentialStore
from report_portal.services.file_store import LocalReportFileStore
from report_portal.services.report_service import ReportService
from report_portal.services.session_store import SessionStore


def get_settings(request: Request) -> AppConfig:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an AsyncSession for the portal database."""
    factory = request.app.state.db.session_factory()
    async with factory() as session:
        yield session


def get_file_store(request: Request) -> LocalReportFileStore:
    return request.app.state.file_store


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials


def get_session_store(
    db_session: AsyncSession = Depends(get_db_session),
    settings: AppConfig = Depends(get_settings),
) -> SessionStore:
    return SessionStore(db_session, ttl_seconds=settings.session_ttl_seconds)


def get_report_service(
    db_session: AsyncSession = Depends(get_db_session),
    file_store: LocalReportFileStore = Depends(get_file_store),
    settings: AppConfig = Depends(get_settings),
) -> ReportService:
    return ReportService(
        file_store, db_session, max_upload_bytes=settings.max_upload_bytes
    )
