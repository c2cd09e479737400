"""
HTTP 访问日志中间件

记录所有 HTTP 请求的访问日志到 access.log 文件, 需要注册在 RequestIDMiddleware 之内.
"""

import time
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from blog_server.core.logging import get_access_logger


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    HTTP 访问日志中间件

    日志格式: {method} {path} {status_code} {duration}ms {client_ip} user={user_id}
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration = (time.perf_counter() - start_time) * 1000  # 毫秒
        request_id = getattr(request.state, "request_id", "-")
        userinfo = getattr(request.state, "userinfo", None)
        user_id = userinfo["user_id"] if userinfo else "-"

        get_access_logger(request_id).info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration:.2f}ms {client_ip} user={user_id}"
        )

        return response
