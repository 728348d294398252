"""Report listing schemas"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from report_portal.report_db.models import Report

DOWNLOAD_PREFIX = "/uploads/reports"


def download_url_for(filename: str) -> str:
    return f"{DOWNLOAD_PREFIX}/{filename}"


class ReportSummary(BaseModel):
    """One entry of the public report listing"""

    id: int = Field(..., description="报告ID")
    original_name: str = Field(..., description="上传时的原始文件名")
    filename: str = Field(..., description="存储文件名")
    uploaded_at: datetime = Field(..., description="上传时间（UTC）")
    file_size: int = Field(..., description="文件大小（字节）")
    download_url: str = Field(..., description="下载地址")

    @classmethod
    def from_report(cls, report: Report) -> "ReportSummary":
        return cls(
            id=report.id,
            original_name=report.original_name,
            filename=report.filename,
            uploaded_at=report.uploaded_at,
            file_size=report.file_size,
            download_url=download_url_for(report.filename),
        )


class ReportListResponse(BaseModel):
    """报告列表响应"""

    total: int = Field(..., description="报告总数")
    items: List[ReportSummary] = Field(default_factory=list, description="报告列表")
