"""
统一错误处理器
将业务异常映射为 HTTP 响应（HTML 页面或重定向）
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from report_portal.api.templating import render
from report_portal.exceptions import (
    AdminLoginRequired,
    PortalException,
    ReportNotFoundError,
    ReportStorageError,
)
from report_portal.logger import logger

LOGIN_PATH = "/admin/login"

GENERIC_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: "The request could not be processed.",
    status.HTTP_404_NOT_FOUND: "The requested page or file was not found.",
    status.HTTP_405_METHOD_NOT_ALLOWED: "This method is not allowed here.",
    422: "The submitted data was invalid.",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Something went wrong on our side. Please try again later.",
}


def create_error_response(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def error_page(request: Request, status_code: int, code: str):
    """Generic error page; never includes exception details"""
    message = GENERIC_MESSAGES.get(status_code, "The request could not be processed.")
    if _wants_json(request):
        return JSONResponse(
            status_code=status_code, content=create_error_response(code, message)
        )
    return render(
        request,
        "error.html",
        {"status_code": status_code, "message": message},
        status_code=status_code,
    )


async def login_required_handler(request: Request, exc: AdminLoginRequired):
    """未登录：重定向到登录页"""
    return RedirectResponse(url=LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)


async def report_not_found_handler(request: Request, exc: ReportNotFoundError):
    logger.warning(f"Report not found: {exc.filename}")
    return error_page(request, status.HTTP_404_NOT_FOUND, exc.code)


async def report_storage_error_handler(request: Request, exc: ReportStorageError):
    logger.opt(exception=exc).error(f"Report storage error [{exc.code}]: {exc.message}")
    return error_page(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc.code)


async def portal_exception_handler(request: Request, exc: PortalException):
    logger.error(f"Portal error [{exc.code}]: {exc.message}")
    return error_page(request, exc.status_code, exc.code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}")
    return error_page(request, exc.status_code, "HTTP_ERROR")


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """处理 FastAPI 层的请求验证错误"""
    logger.warning(f"Request validation error: {exc.errors()}")
    return error_page(request, 422, "VALIDATION_ERROR")


def register_error_handlers(app):
    """
    注册所有错误处理器到 FastAPI 应用

    Args:
        app: FastAPI 应用实例
    """
    app.add_exception_handler(AdminLoginRequired, login_required_handler)
    app.add_exception_handler(ReportNotFoundError, report_not_found_handler)
    app.add_exception_handler(ReportStorageError, report_storage_error_handler)
    app.add_exception_handler(PortalException, portal_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    logger.debug("Registered report portal error handlers")
