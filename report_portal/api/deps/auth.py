"""
认证依赖
从会话 Cookie 中解析管理员会话
"""

from typing import Optional

from fastapi import Depends, Request

from report_portal.api.deps.services import get_session_store, get_settings
from report_portal.config import AppConfig
from report_portal.exceptions import AdminLoginRequired
from report_portal.logger import logger
from report_portal.report_db.models import AdminSession
from report_portal.services.session_store import SessionStore


def get_session_id(
    request: Request, settings: AppConfig = Depends(get_settings)
) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_admin_session(
    session_id: Optional[str] = Depends(get_session_id),
    sessions: SessionStore = Depends(get_session_store),
) -> Optional[AdminSession]:
    """
    获取当前管理员会话（可选，不强制认证）

    用于公开页面，仅决定是否显示管理入口

    Returns:
        有效的管理员会话，未登录或已过期返回 None
    """
    admin_session = await sessions.get(session_id)
    if admin_session is None or not admin_session.admin_logged_in:
        return None
    return admin_session


async def require_admin(
    request: Request,
    admin_session: Optional[AdminSession] = Depends(get_optional_admin_session),
) -> AdminSession:
    """
    管理员认证闸门

    Raises:
        AdminLoginRequired: 未登录时抛出，由错误处理器转换为重定向到登录页
    """
    if admin_session is None:
        logger.info(f"Admin login required for {request.method} {request.url.path}")
        raise AdminLoginRequired()
    return admin_session
