"""
统一日志配置模块

日志文件:
1. app.log    所有日志
2. error.log  ERROR 及以上级别, 带异常堆栈
3. access.log HTTP 访问日志 (可选), 每行带请求ID
4. 通过 register_module_logger 为特定模块注册的单独日志文件

使用方式:
    # 在 main.py 中初始化
    from blog_server.core.logging import setup_logging
    setup_logging(log_dir=settings.LOG_DIR, log_level="INFO")

    # 在其他文件中直接使用 loguru
    from loguru import logger
    logger.info("普通日志")

    # 权限检查日志单独记录到 rbac.log
    from blog_server.core.logging import register_module_logger
    register_module_logger("blog_server.services.rbac_service", "rbac.log")
"""

from typing import Dict, Optional
from pathlib import Path
from loguru import logger
import sys

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
ACCESS_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {extra[request_id]} | {message}"


def _is_access_record(record) -> bool:
    """访问日志通过 extra 中的 access 标识区分"""
    return record["extra"].get("access", False)


class LoggingManager:
    """日志管理器, 负责 loguru sink 的注册"""

    def __init__(self):
        self.log_dir: Optional[Path] = None
        self.module_loggers: Dict[str, str] = {}  # 模块名 -> 日志文件名
        self._initialized = False

    def setup(
        self,
        log_dir: Path,
        log_level: str = "INFO",
        enable_access_log: bool = True,
    ):
        """
        初始化日志系统

        Args:
            log_dir: 日志目录路径
            log_level: 日志级别 (DEBUG/INFO/WARNING/ERROR/CRITICAL)
            enable_access_log: 是否启用 HTTP 访问日志
        """
        if self._initialized:
            logger.debug("日志系统已初始化, 跳过重复初始化")
            return

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        logger.remove()
        # 访问日志缺省 request_id, 避免 format 中 KeyError
        logger.configure(extra={"request_id": "-"})

        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

        # 应用主日志不重复记录访问日志
        logger.add(
            self.log_dir / "app.log",
            format=FILE_FORMAT,
            level=log_level,
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
            filter=lambda record: not _is_access_record(record),
        )

        logger.add(
            self.log_dir / "error.log",
            format=FILE_FORMAT + "\n{exception}",
            level="ERROR",
            rotation="50 MB",
            retention="90 days",
            compression="zip",
            encoding="utf-8",
        )

        if enable_access_log:
            logger.add(
                self.log_dir / "access.log",
                format=ACCESS_FORMAT,
                level="INFO",
                rotation="100 MB",
                retention="30 days",
                compression="zip",
                encoding="utf-8",
                filter=_is_access_record,
            )

        self._initialized = True
        logger.debug(f"日志系统初始化完成, 日志目录: {self.log_dir}")

    def register_module_logger(
        self, module_name: str, log_filename: str, log_level: str = "DEBUG"
    ):
        """
        为特定模块注册单独的日志文件, 模块日志同时写入 app.log

        Args:
            module_name: 模块名 (如 "blog_server.services.rbac_service")
            log_filename: 日志文件名 (如 "rbac.log")
            log_level: 该模块的日志级别
        """
        if not self._initialized or not self.log_dir:
            raise RuntimeError("日志系统尚未初始化, 请先调用 setup()")

        logger.add(
            self.log_dir / log_filename,
            format=FILE_FORMAT + "\n{exception}",
            level=log_level,
            rotation="50 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
            filter=lambda record: record["name"].startswith(module_name),
        )

        self.module_loggers[module_name] = log_filename
        logger.info(f"已为模块 '{module_name}' 注册单独日志文件: {log_filename}")

    def get_access_logger(self, request_id: str = "-"):
        """获取 HTTP 访问日志专用的 logger"""
        return logger.bind(access=True, request_id=request_id)


# 全局日志管理器实例
_logging_manager = LoggingManager()


def setup_logging(
    log_dir: Path,
    log_level: str = "INFO",
    enable_access_log: bool = True,
):
    """初始化日志系统 (便捷函数)"""
    _logging_manager.setup(log_dir, log_level, enable_access_log)


def register_module_logger(
    module_name: str, log_filename: str, log_level: str = "DEBUG"
):
    """为特定模块注册单独的日志文件 (便捷函数)"""
    _logging_manager.register_module_logger(module_name, log_filename, log_level)


def get_access_logger(request_id: str = "-"):
    """
    获取 HTTP 访问日志专用的 logger

    使用示例:
        access_logger = get_access_logger(request_id)
        access_logger.info(f"{method} {path} {status_code} {duration}ms")
    """
    return _logging_manager.get_access_logger(request_id)
