"""Local filesystem store for uploaded report files"""

import time
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from report_portal.logger import logger


class LocalReportFileStore:
    """Report files kept flat in a single directory.

    Stored names are generated here and never derived from the uploader's
    filename, so only names produced by ``generate_stored_filename`` (or at
    least plain basenames) ever reach the filesystem.
    """

    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)

    def ensure_dir(self) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    def generate_stored_filename(self, suffix: str = ".pdf") -> str:
        """生成存储文件名

        Returns:
            文件名，格式：<毫秒时间戳>-<uuid hex><suffix>
        """
        timestamp = int(time.time() * 1000)
        return f"{timestamp}-{uuid.uuid4().hex}{suffix}"

    @staticmethod
    def is_safe_name(filename: str) -> bool:
        """A plain basename: no separators, no parent refs, not hidden"""
        if not filename or filename.startswith("."):
            return False
        if "/" in filename or "\\" in filename or "\x00" in filename:
            return False
        return ".." not in filename

    def _path_for(self, filename: str) -> Optional[Path]:
        if not self.is_safe_name(filename):
            return None
        path = self.upload_dir / filename
        if path.resolve().parent != self.upload_dir.resolve():
            return None
        return path

    async def save(self, filename: str, content: bytes) -> Path:
        """Write content under filename, creating the directory if absent.

        Raises:
            ValueError: filename is not a plain basename
            OSError: the write failed
        """
        self.ensure_dir()
        path = self._path_for(filename)
        if path is None:
            raise ValueError(f"Unsafe stored filename: {filename!r}")

        async with aiofiles.open(path, "xb") as f:
            await f.write(content)

        logger.debug(f"Report file written: {path} ({len(content)} bytes)")
        return path

    def resolve(self, filename: str) -> Optional[Path]:
        """Path of an existing stored file, or None"""
        path = self._path_for(filename)
        if path is None or not path.is_file():
            return None
        return path

    async def delete(self, filename: str) -> bool:
        path = self._path_for(filename)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Report file deleted: {path}")
        return True
