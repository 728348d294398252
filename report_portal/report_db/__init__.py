"""Report portal database package.

Contains SQLAlchemy 2.0 style ORM models for report metadata and admin
sessions, plus the async engine wrapper used by the app.
"""

from .models import (
    AdminSession,
    Base,
    Report,
    utcnow,
)
from .session import ReportDatabase

__all__ = [
    "AdminSession",
    "Base",
    "Report",
    "ReportDatabase",
    "utcnow",
]
