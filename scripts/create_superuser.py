"""
创建超级用户脚本

创建用户(已存在时更新邮箱和密码)并分配内置超级管理员角色

使用方法:
    python scripts/create_superuser.py <username> <email> <password>

示例:
    python scripts/create_superuser.py admin admin@example.com password123
"""

import asyncio
import sys

from loguru import logger

from blog_server.core.config import settings
from blog_server.core.db import AsyncSessionLocal
from blog_server.core.security import get_password_hash
from blog_server.repositories.role_repository import RoleRepository
from blog_server.repositories.user_repository import UserRepository


async def create_superuser(username: str, email: str, password: str):
    async with AsyncSessionLocal() as db:
        user_repo = UserRepository(db)
        role_repo = RoleRepository(db)

        if await role_repo.get(settings.SUPERUSER_ROLE_ID) is None:
            raise RuntimeError("超级管理员角色不存在, 请先执行 scripts/init_rbac.py")

        user = await user_repo.get_by_field("username", username)
        hashed_password = get_password_hash(password)
        if user:
            await user_repo.update(user, email=email, hashed_password=hashed_password, is_active=True)
            logger.info(f"用户 '{username}' 已存在, 更新邮箱和密码")
        else:
            user = await user_repo.create(
                username=username, email=email, hashed_password=hashed_password
            )
            logger.info(f"创建用户 '{username}' (ID: {user.id})")

        user = await user_repo.get_with_roles(user.id)
        role_ids = {role.id for role in user.roles}
        role_ids.add(settings.SUPERUSER_ROLE_ID)
        await user_repo.replace_roles(user.id, role_ids)
        await db.commit()
        logger.info(f"用户 '{username}' 已分配超级管理员角色, role_ids={sorted(role_ids)}")


async def main():
    if len(sys.argv) < 4:
        print("使用方法: python scripts/create_superuser.py <username> <email> <password>")
        sys.exit(1)

    username, email, password = sys.argv[1], sys.argv[2], sys.argv[3]

    if len(username) < 3:
        print("用户名至少需要3个字符")
        sys.exit(1)
    if len(password) < 6:
        print("密码至少需要6个字符")
        sys.exit(1)
    if "@" not in email:
        print("邮箱格式不正确")
        sys.exit(1)

    await create_superuser(username, email, password)


if __name__ == "__main__":
    asyncio.run(main())
