"""Server-side admin session store"""

import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.logger import logger
from report_portal.report_db.models import AdminSession, utcnow


class SessionStore:
    """Admin sessions keyed by an opaque token carried in the session cookie"""

    def __init__(self, db_session: AsyncSession, ttl_seconds: int):
        self.db = db_session
        self.ttl = timedelta(seconds=ttl_seconds)

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(32)

    async def create(self, admin_logged_in: bool = True) -> AdminSession:
        now = utcnow()
        admin_session = AdminSession(
            id=self.new_session_id(),
            admin_logged_in=admin_logged_in,
            created_at=now,
            expires_at=now + self.ttl,
        )
        async with self.db.begin():
            self.db.add(admin_session)
            await self.db.flush()

        logger.debug(f"Admin session created, expires_at={admin_session.expires_at}")
        return admin_session

    async def get(self, session_id: Optional[str]) -> Optional[AdminSession]:
        """Load a live session.

        Expired sessions are deleted and reported as missing.
        """
        if not session_id:
            return None

        async with self.db.begin():
            # always hit the table; the identity map may hold a destroyed row
            admin_session = await self.db.get(
                AdminSession, session_id, populate_existing=True
            )
            if admin_session is None:
                return None

            if admin_session.is_expired():
                await self.db.delete(admin_session)
                logger.info("Expired admin session removed")
                return None

            return admin_session

    async def destroy(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False

        async with self.db.begin():
            result = await self.db.execute(
                delete(AdminSession).where(AdminSession.id == session_id)
            )
        return result.rowcount > 0

    async def purge_expired(self) -> int:
        """Delete every expired session, returning how many were removed"""
        async with self.db.begin():
            result = await self.db.execute(
                delete(AdminSession).where(AdminSession.expires_at <= utcnow())
            )
        if result.rowcount:
            logger.info(f"Purged {result.rowcount} expired admin sessions")
        return result.rowcount
