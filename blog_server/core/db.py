from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from blog_server.core.config import settings

# 创建 Base 类，用于定义数据库模型
Base = declarative_base()

# 创建异步数据库引擎
engine = create_async_engine(
    settings.DATABASE_URL,
    # 连接池配置
    pool_size=20,
    max_overflow=10,
    pool_recycle=3600,  # 连接回收时间（秒）
    pool_pre_ping=True,  # 连接前检查连接是否有效，自动重连失效连接
    echo=settings.DEBUG,  # 调试模式下打印 SQL
)

# 创建异步会话工厂
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    异步数据库会话依赖注入

    每个请求一个会话, 处理过程中出现异常时回滚
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.debug(f"请求处理异常, 回滚数据库会话: {e!r}")
            await session.rollback()
            raise
        finally:
            await session.close()
