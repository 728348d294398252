"""Public report routes: listing and download"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from report_portal.api.deps.auth import get_optional_admin_session
from report_portal.api.deps.services import get_report_service
from report_portal.api.templating import render
from report_portal.report_db.models import AdminSession
from report_portal.schemas.report import ReportListResponse, ReportSummary
from report_portal.services.report_service import ReportService

router = APIRouter(tags=["Reports"])


def format_file_size(size_bytes: int) -> str:
    """格式化文件大小"""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} TB"


@router.get("/admin/reports")
async def list_reports_page(
    request: Request,
    admin_session: Optional[AdminSession] = Depends(get_optional_admin_session),
    service: ReportService = Depends(get_report_service),
):
    reports = [ReportSummary.from_report(r) for r in await service.list_reports()]
    return render(
        request,
        "reports.html",
        {"reports": reports, "format_file_size": format_file_size},
        admin_session=admin_session,
    )


@router.get("/api/reports", response_model=ReportListResponse)
async def list_reports_api(
    service: ReportService = Depends(get_report_service),
) -> ReportListResponse:
    """报告列表（JSON），按上传时间倒序"""
    items = [ReportSummary.from_report(r) for r in await service.list_reports()]
    return ReportListResponse(total=len(items), items=items)


@router.get("/uploads/reports/{filename}")
async def download_report(
    filename: str,
    service: ReportService = Depends(get_report_service),
):
    """下载报告文件

    Only files with a report record are served; anything else is a 404.
    """
    report, path = await service.get_report_file(filename)
    return FileResponse(
        path=path,
        filename=report.original_name,
        media_type=report.content_type,
    )
