"""报告管理服务"""

from pathlib import Path
from typing import List, Optional, Tuple

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.exceptions import (
    ReportNotFoundError,
    ReportStorageError,
    UploadValidationError,
)
from report_portal.logger import logger
from report_portal.report_db.models import Report
from report_portal.services.file_store import LocalReportFileStore

PDF_CONTENT_TYPE = "application/pdf"
MAX_ORIGINAL_NAME_LENGTH = 255


class ReportService:
    """Upload, listing and lookup of reports"""

    def __init__(
        self,
        file_store: LocalReportFileStore,
        db_session: AsyncSession,
        max_upload_bytes: int,
    ):
        """初始化服务

        Args:
            file_store: 报告文件存储
            db_session: 数据库会话
            max_upload_bytes: 单个文件的大小上限
        """
        self.file_store = file_store
        self.db = db_session
        self.max_upload_bytes = max_upload_bytes

    async def _read_validated(self, upload: Optional[UploadFile]) -> bytes:
        """Validate the uploaded file and return its content"""
        if upload is None or not upload.filename:
            raise UploadValidationError("Please choose a PDF file to upload.")

        if len(upload.filename) > MAX_ORIGINAL_NAME_LENGTH:
            raise UploadValidationError("File name is too long.")

        if Path(upload.filename).suffix.lower() != ".pdf":
            raise UploadValidationError("Only PDF files can be uploaded.")

        content = await upload.read(self.max_upload_bytes + 1)
        if len(content) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes / (1024 * 1024)
            raise UploadValidationError(f"File is too large. Maximum allowed: {limit_mb:g}MB.")

        if not content:
            raise UploadValidationError("The uploaded file is empty.")

        return content

    async def upload_report(self, upload: Optional[UploadFile]) -> Report:
        """Store the file, then insert its metadata record.

        If the insert fails the written file is removed again, so a record
        never exists without its file and a failed upload leaves no orphan.

        Raises:
            UploadValidationError: missing, empty, oversized or non-PDF file
            ReportStorageError: the file write or the metadata insert failed
        """
        content = await self._read_validated(upload)
        original_name = upload.filename
        stored_name = self.file_store.generate_stored_filename()

        try:
            await self.file_store.save(stored_name, content)
        except (OSError, ValueError) as e:
            logger.error(f"Error writing report file {stored_name}: {e}")
            raise ReportStorageError("Failed to store the uploaded file") from e

        report = Report(
            original_name=original_name,
            filename=stored_name,
            file_size=len(content),
            content_type=PDF_CONTENT_TYPE,
        )
        try:
            async with self.db.begin():
                self.db.add(report)
                await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error saving report metadata for {stored_name}: {e}")
            removed = await self.file_store.delete(stored_name)
            logger.warning(f"Rolled back report file {stored_name}: removed={removed}")
            raise ReportStorageError("Failed to save report metadata") from e

        logger.info(
            f"Report uploaded: id={report.id}, original_name={original_name}, "
            f"filename={stored_name}, size={len(content)}"
        )
        return report

    async def list_reports(self) -> List[Report]:
        """All reports, most recent first"""
        async with self.db.begin():
            stmt = select(Report).order_by(Report.uploaded_at.desc(), Report.id.desc())
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def get_report(self, filename: str) -> Report:
        if not self.file_store.is_safe_name(filename):
            raise ReportNotFoundError(filename)

        async with self.db.begin():
            stmt = select(Report).where(Report.filename == filename)
            result = await self.db.execute(stmt)
            report = result.scalar_one_or_none()

        if report is None:
            raise ReportNotFoundError(filename)
        return report

    async def get_report_file(self, filename: str) -> Tuple[Report, Path]:
        """Resolve a stored filename to its record and file on disk.

        Raises:
            ReportNotFoundError: unknown name, unsafe name, or the file is gone
        """
        report = await self.get_report(filename)

        path = self.file_store.resolve(report.filename)
        if path is None:
            logger.warning(f"Report {report.id} has no file on disk: {report.filename}")
            raise ReportNotFoundError(filename)
        return report, path
