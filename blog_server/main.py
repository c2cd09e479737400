from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from blog_server.core.config import settings
from blog_server.core.logging import register_module_logger, setup_logging

# 初始化日志系统 (必须在其他模块导入之前)
setup_logging(
    log_dir=settings.LOG_DIR,
    log_level=settings.LOG_LEVEL if not settings.DEBUG else "DEBUG",
    enable_access_log=settings.ENABLE_ACCESS_LOG,
)
if settings.ENABLE_RBAC_LOG:
    register_module_logger("blog_server.services.rbac_service", "rbac.log")

from blog_server.core.db import engine  # noqa: E402
from blog_server.core.exceptions import register_exception_handlers  # noqa: E402
from blog_server.core.redis import close_redis_client  # noqa: E402
from blog_server.dependencies.auth import http_bearer  # noqa: E402
from blog_server.dependencies.permissions import require_api_permission  # noqa: E402
from blog_server.middleware.access_log import AccessLogMiddleware  # noqa: E402
from blog_server.middleware.global_auth import GlobalAuthMiddleware  # noqa: E402
from blog_server.middleware.request_id import RequestIDMiddleware  # noqa: E402
from blog_server.routers import auth, categories, permissions, roles, tags, users  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} 启动")
    yield
    await close_redis_client()
    await engine.dispose()
    logger.info(f"{settings.APP_NAME} 已关闭")


# 创建 FastAPI 应用实例
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

register_exception_handlers(app)

# 根据环境变量配置CORS
if settings.DEBUG:
    # 开发环境：允许所有（但不使用Cookie）
    allow_origins = ["*"]
    allow_credentials = False
else:
    # 生产环境：指定具体域名（使用Cookie）
    allow_origins = settings.CORS_ORIGINS
    allow_credentials = True

# 中间件的执行顺序是后进先出(LIFO), 最后注册的最先执行:
# RequestID -> CORS -> 访问日志 -> 全局认证
app.add_middleware(GlobalAuthMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestIDMiddleware)


@app.get("/")
async def root():
    """根路径"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    return {"status": "healthy"}


# 前台接口
app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
app.include_router(users.router, prefix=settings.API_V1_PREFIX)
app.include_router(categories.router, prefix=settings.API_V1_PREFIX)
app.include_router(tags.router, prefix=settings.API_V1_PREFIX)

# 管理端接口, 全部经过 RBAC 接口权限检查
admin_dependencies = [Depends(http_bearer), Depends(require_api_permission)]
for admin_router in (
    users.admin_router,
    roles.admin_router,
    permissions.admin_router,
    categories.admin_router,
    tags.admin_router,
):
    app.include_router(
        admin_router,
        prefix=settings.ADMIN_API_V1_PREFIX,
        dependencies=admin_dependencies,
    )
