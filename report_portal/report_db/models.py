from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite DateTime columns do not keep tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base for report portal tables."""


class Report(Base):
    """Metadata for one uploaded report file"""
    __tablename__ = "reports"

    # SQLite兼容：使用Integer而不是BigInteger作为主键
    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    original_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    filename: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    # Python-side default keeps sub-second precision for listing order
    uploaded_at: Mapped[datetime] = mapped_column(
        sa.DateTime, default=utcnow, nullable=False
    )
    file_size: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    content_type: Mapped[str] = mapped_column(
        sa.String(100), default="application/pdf", nullable=False
    )

    __table_args__ = (
        Index("idx_reports_uploaded_at", "uploaded_at"),
    )

    def __repr__(self) -> str:
        return f"<Report id={self.id} filename={self.filename!r}>"


class AdminSession(Base):
    """Server-side admin session keyed by the opaque cookie value"""
    __tablename__ = "admin_sessions"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    admin_logged_in: Mapped[bool] = mapped_column(
        sa.Boolean, default=False, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime, default=utcnow, nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)

    __table_args__ = (
        Index("idx_admin_sessions_expires_at", "expires_at"),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at
