"""
全局认证中间件

强制所有接口都需要认证(除了白名单中的路径).
Token 校验通过后, 把 Token 中的用户信息写入 request.state.userinfo:
    {"user_id": int, "username": str, "role_ids": List[int]}
中间件不查询数据库, 需要完整用户信息时使用 Depends(get_current_user).

白名单路径(不需要认证):
- / (根路径), /health (健康检查)
- /docs, /openapi.json, /redoc (API 文档)
- /api/v1/auth/* (登录, 注册, 刷新, 登出)
- /api/v1/categories*, /api/v1/tags* (前台公开的分类和标签)
"""

from typing import Callable, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from blog_server.core.config import settings
from blog_server.core.security import decode_access_token

API = settings.API_V1_PREFIX


class GlobalAuthMiddleware(BaseHTTPMiddleware):
    """全局认证中间件, 认证失败返回 401"""

    # 不需要认证的路径(白名单)
    NO_AUTH_PATHS = {
        "/",
        "/health",
        "/docs",
        "/openapi.json",
        "/redoc",
        f"{API}/categories",
        f"{API}/tags",
    }

    # 不需要认证的路径前缀
    NO_AUTH_PREFIXES = (
        "/docs/",
        f"{API}/auth/",
        f"{API}/categories/",
        f"{API}/tags/",
    )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # 预检请求交给 CORS 中间件处理
        if request.method == "OPTIONS" or self._is_no_auth_path(request.url.path):
            return await call_next(request)

        token = self._get_token_from_request(request)
        if not token:
            return self._unauthorized(request, "未提供认证凭据")

        userinfo = self._authenticate_token(token)
        if userinfo is None:
            return self._unauthorized(request, "无效的认证凭据")

        request.state.userinfo = userinfo
        return await call_next(request)

    def _is_no_auth_path(self, path: str) -> bool:
        if path in self.NO_AUTH_PATHS:
            return True
        return path.startswith(self.NO_AUTH_PREFIXES)

    def _get_token_from_request(self, request: Request) -> Optional[str]:
        """
        从请求中获取 Token, 支持 Cookie 和 Header 两种方式

        优先级: Cookie > Header (Authorization Bearer)
        """
        token = request.cookies.get("token")
        if token:
            return token

        authorization = request.headers.get("Authorization")
        if authorization and authorization.startswith("Bearer "):
            return authorization.split(" ", 1)[1]

        return None

    def _authenticate_token(self, token: str) -> Optional[dict]:
        """解码 Token, 无效或缺少必要字段时返回 None"""
        payload = decode_access_token(token)
        if payload is None:
            return None

        user_id = payload.get("user_id")
        username = payload.get("sub")
        if user_id is None or username is None:
            return None

        return {
            "user_id": user_id,
            "username": username,
            "role_ids": payload.get("role_ids") or [],
        }

    @staticmethod
    def _unauthorized(request: Request, detail: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "detail": detail,
                "error_code": "unauthorized",
                "request_id": getattr(request.state, "request_id", None),
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
