"""Admin routes: login, logout and report upload"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from report_portal.api.deps.auth import (
    get_optional_admin_session,
    get_session_id,
    require_admin,
)
from report_portal.api.deps.services import (
    get_credential_store,
    get_report_service,
    get_session_store,
    get_settings,
)
from report_portal.api.templating import render
from report_portal.config import AppConfig
from report_portal.exceptions import UploadValidationError
from report_portal.logger import logger
from report_portal.report_db.models import AdminSession
from report_portal.services.credentials import CredentialStore
from report_portal.services.report_service import ReportService
from report_portal.services.session_store import SessionStore

router = APIRouter(prefix="/admin", tags=["Admin"])

INVALID_CREDENTIALS = "Invalid credentials"


def get_client_ip(request: Request) -> str:
    """获取客户端IP"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.get("/login")
async def login_form(
    request: Request,
    admin_session: Optional[AdminSession] = Depends(get_optional_admin_session),
):
    return render(
        request, "admin_login.html", {"error": None}, admin_session=admin_session
    )


@router.post("/login")
async def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    session_id: Optional[str] = Depends(get_session_id),
    credentials: CredentialStore = Depends(get_credential_store),
    sessions: SessionStore = Depends(get_session_store),
    settings: AppConfig = Depends(get_settings),
):
    # bcrypt is CPU bound, keep it off the event loop
    valid = await run_in_threadpool(credentials.verify, username, password)
    if not valid:
        logger.warning(f"Admin login failed from {get_client_ip(request)}")
        return render(
            request,
            "admin_login.html",
            {"error": INVALID_CREDENTIALS},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    # rotate: never reuse a session id issued before login
    await sessions.destroy(session_id)
    admin_session = await sessions.create(admin_logged_in=True)
    logger.info(f"Admin logged in from {get_client_ip(request)}")

    response = RedirectResponse(
        url="/admin/report-upload", status_code=status.HTTP_303_SEE_OTHER
    )
    response.set_cookie(
        key=settings.session_cookie_name,
        value=admin_session.id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return response


@router.get("/logout")
async def logout(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_session_store),
    settings: AppConfig = Depends(get_settings),
):
    destroyed = await sessions.destroy(session_id)
    if destroyed:
        logger.info("Admin logged out")

    response = RedirectResponse(url="/admin/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return response


@router.get("/report-upload")
async def upload_form(
    request: Request,
    admin_session: AdminSession = Depends(require_admin),
    settings: AppConfig = Depends(get_settings),
):
    return render(
        request,
        "report_upload.html",
        {"error": None, "max_upload_mb": settings.max_upload_mb},
        admin_session=admin_session,
    )


@router.post("/report-upload")
async def upload_report(
    request: Request,
    admin_session: AdminSession = Depends(require_admin),
    pdf: Optional[UploadFile] = File(None, description="上传的PDF报告"),
    service: ReportService = Depends(get_report_service),
    settings: AppConfig = Depends(get_settings),
):
    try:
        await service.upload_report(pdf)
    except UploadValidationError as e:
        logger.warning(f"Upload rejected: {e.message}")
        return render(
            request,
            "report_upload.html",
            {"error": e.message, "max_upload_mb": settings.max_upload_mb},
            admin_session=admin_session,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    finally:
        if pdf is not None:
            await pdf.close()

    return RedirectResponse(url="/admin/reports", status_code=status.HTTP_303_SEE_OTHER)
