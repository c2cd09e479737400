"""
应用异常定义与全局异常处理

业务层抛出 AppException 的子类, 由注册在应用上的处理器统一转换为 JSON 响应:
    {"detail": "...", "error_code": "...", "request_id": "..."}

权限检查需要区分两类失败:
- ForbiddenError: 检查已完成, 没有匹配的权限 (403)
- InfrastructureError: 无法完成检查, 如数据库查询失败 (500)
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class AppException(Exception):
    """应用异常基类"""

    message: str = "服务器内部错误"
    error_code: str = "internal_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """请求的资源不存在"""

    message = "资源不存在"
    error_code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(AppException):
    """
    请求参数校验失败

    写入时引用的父节点/角色/权限不存在也归为此类, 而不是 404
    """

    message = "请求参数错误"
    error_code = "bad_request"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppException):
    """唯一性冲突"""

    message = "资源已存在"
    error_code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(AppException):
    """未认证或认证凭据无效"""

    message = "请先登录"
    error_code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppException):
    """权限不足"""

    message = "权限不足"
    error_code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class InfrastructureError(AppException):
    """存储层不可用或查询失败"""

    message = "服务器内部错误"
    error_code = "infrastructure_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(request: Request, exc: AppException) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "detail": exc.message,
        "error_code": exc.error_code,
        "request_id": getattr(request.state, "request_id", None),
    }
    if exc.details:
        body["details"] = exc.details
    return body


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """将 AppException 转换为 JSON 响应"""
    if exc.status_code >= 500:
        logger.error(
            f"{exc.error_code}: {exc.message} - {request.method} {request.url.path}"
        )
    else:
        logger.warning(
            f"{exc.error_code}: {exc.message} - {request.method} {request.url.path}"
        )

    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc),
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """兜底处理未捕获的异常, 记录堆栈后返回 500"""
    logger.opt(exception=exc).error(
        f"未处理的异常: {request.method} {request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, AppException()),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """在应用上注册异常处理器"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
