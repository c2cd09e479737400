"""
初始化 RBAC 系统
创建内置角色和默认权限, 可重复执行, 已存在的记录跳过

使用方法:
    python scripts/init_rbac.py
"""

import asyncio
from typing import Dict

from loguru import logger
from sqlalchemy import select, text

from blog_server.core.db import AsyncSessionLocal
from blog_server.models.defaults import DEFAULT_PERMISSIONS, DEFAULT_ROLES
from blog_server.models.permission import Permission
from blog_server.models.role import Role
from blog_server.repositories.role_repository import RoleRepository


async def init_permissions(db) -> Dict[str, int]:
    """初始化权限, 返回 perm_key -> id 映射"""
    logger.info("初始化权限...")
    result = await db.execute(select(Permission))
    key_to_id = {p.perm_key: p.id for p in result.scalars().all()}

    created_count = 0
    for perm_data in DEFAULT_PERMISSIONS:
        values = dict(perm_data)
        parent_key = values.pop("parent_key")
        if values["perm_key"] in key_to_id:
            continue

        values["parent_id"] = key_to_id[parent_key] if parent_key else None
        values["is_builtin"] = True
        permission = Permission(**values)
        db.add(permission)
        await db.flush()
        key_to_id[permission.perm_key] = permission.id
        created_count += 1
        logger.info(f"  创建权限: {permission.perm_key}")

    await db.commit()
    logger.info(f"权限初始化完成, 创建了 {created_count} 个新权限")
    return key_to_id


async def init_roles(db, key_to_id: Dict[str, int]) -> None:
    """初始化角色, 角色ID固定, 超级管理员角色必须为 1"""
    logger.info("初始化角色...")
    repo = RoleRepository(db)

    for role_data in DEFAULT_ROLES:
        values = dict(role_data)
        permission_keys = values.pop("permission_keys")
        if await repo.get(values["id"]) is not None:
            logger.info(f"  角色已存在: {values['role_key']}")
            continue

        values["is_builtin"] = True
        db.add(Role(**values))
        await db.flush()
        await repo.replace_permissions(values["id"], [key_to_id[k] for k in permission_keys])
        logger.info(f"  创建角色: {values['role_key']} (ID: {values['id']})")

    # 显式指定了ID, 需要同步自增序列
    await db.execute(
        text("SELECT setval(pg_get_serial_sequence('sys_roles', 'id'), (SELECT MAX(id) FROM sys_roles))")
    )
    await db.commit()
    logger.info("角色初始化完成")


async def main():
    async with AsyncSessionLocal() as db:
        key_to_id = await init_permissions(db)
        await init_roles(db, key_to_id)


if __name__ == "__main__":
    asyncio.run(main())
