from typing import List, Optional
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """应用配置，从环境变量读取"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # 忽略未定义的额外环境变量(如数据库容器初始化变量)
    )

    # 应用基础配置（非敏感，可保留默认值）
    APP_NAME: str = "Blog Server"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    BASE_PATH: Path = Path(__file__).resolve().parent.parent

    # 数据库配置（敏感，必须从环境变量读取）
    DATABASE_URL: str = Field(..., description="数据库连接 URL, 必须从环境变量读取")

    # Redis 配置（用于存储 Refresh Token）
    REDIS_HOST: str = Field(default="localhost", description="Redis 主机地址")
    REDIS_PORT: int = Field(default=6379, description="Redis 端口")
    REDIS_DB: int = Field(default=0, description="Redis 数据库编号")
    REDIS_PASSWORD: Optional[str] = Field(default=None, description="Redis 密码")

    # API 配置（非敏感，可保留默认值）
    API_V1_PREFIX: str = "/api/v1"
    ADMIN_API_V1_PREFIX: str = "/admin/api/v1"

    # 跨域配置, DEBUG 模式下允许所有来源
    CORS_ORIGINS: List[str] = Field(
        default_factory=list, description="生产环境允许的跨域来源列表"
    )

    # 安全配置（敏感，必须从环境变量读取）
    SECRET_KEY: str = Field(..., description="密钥, 用于加密和签名, 必须从环境变量读取")
    ALGORITHM: str = Field(default="HS256", description="JWT 算法")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30, description="访问令牌过期时间, 单位: 分钟"
    )
    # Refresh Token 配置
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(
        default=7, description="刷新令牌过期时间, 单位: 天"
    )
    REFRESH_TOKEN_SECRET_KEY: Optional[str] = Field(
        default=None,
        description="Refresh Token 专用密钥(可选, 默认使用 SECRET_KEY)",
    )

    # RBAC 配置
    # 角色 ID 为 1 的角色是内置超级管理员, 跳过所有权限检查
    SUPERUSER_ROLE_ID: int = Field(default=1, description="超级管理员角色ID")

    # 日志配置
    LOG_LEVEL: str = Field(
        default="INFO", description="日志级别 (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )
    LOG_DIR: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "logs",
        description="日志目录路径",
    )
    ENABLE_ACCESS_LOG: bool = Field(default=True, description="是否启用 HTTP 访问日志")
    ENABLE_RBAC_LOG: bool = Field(
        default=True, description="是否把权限检查日志单独写入 rbac.log"
    )


settings = Settings()
