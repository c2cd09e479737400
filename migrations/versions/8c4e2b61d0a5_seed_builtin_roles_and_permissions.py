"""Seed built-in roles and default permissions

Revision ID: 8c4e2b61d0a5
Revises: 3f1a9c2d7b10
Create Date: 2026-10-18 10:05:13.407551

"""

from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

from blog_server.models.defaults import DEFAULT_PERMISSIONS, DEFAULT_ROLES

# revision identifiers, used by Alembic.
revision: str = "8c4e2b61d0a5"
down_revision: Union[str, Sequence[str], None] = "3f1a9c2d7b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERMISSION_COLUMNS = ("perm_name", "perm_key", "perm_type", "path", "api_path", "component", "icon", "sort_order")


def upgrade() -> None:
    """插入默认权限和内置角色, 超级管理员角色ID固定为 1"""
    connection = op.get_bind()

    # 1. 插入权限, 父权限先于子权限
    key_to_id = {}
    for perm in DEFAULT_PERMISSIONS:
        params = {column: perm.get(column) for column in PERMISSION_COLUMNS}
        params["perm_type"] = int(params["perm_type"])
        params["sort_order"] = params["sort_order"] or 0
        params["parent_id"] = key_to_id.get(perm["parent_key"])
        row = connection.execute(
            text("""
                INSERT INTO sys_permissions
                    (perm_name, perm_key, perm_type, parent_id, path, api_path, component, icon, sort_order, is_builtin)
                VALUES
                    (:perm_name, :perm_key, :perm_type, :parent_id, :path, :api_path, :component, :icon, :sort_order, TRUE)
                RETURNING id
            """),
            params,
        ).fetchone()
        key_to_id[perm["perm_key"]] = row[0]

    # 2. 插入角色并分配权限
    for role in DEFAULT_ROLES:
        connection.execute(
            text("""
                INSERT INTO sys_roles (id, role_name, role_key, role_sort, role_desc, is_default, is_builtin)
                VALUES (:id, :role_name, :role_key, :role_sort, :role_desc, :is_default, TRUE)
            """),
            {k: v for k, v in role.items() if k != "permission_keys"},
        )
        for perm_key in role["permission_keys"]:
            connection.execute(
                text("""
                    INSERT INTO sys_role_permissions (role_id, permission_id)
                    VALUES (:role_id, :permission_id)
                """),
                {"role_id": role["id"], "permission_id": key_to_id[perm_key]},
            )

    # 3. 显式指定了角色ID, 同步自增序列
    connection.execute(
        text("SELECT setval(pg_get_serial_sequence('sys_roles', 'id'), (SELECT MAX(id) FROM sys_roles))")
    )


def downgrade() -> None:
    connection = op.get_bind()
    role_ids = [role["id"] for role in DEFAULT_ROLES]
    perm_keys = [perm["perm_key"] for perm in DEFAULT_PERMISSIONS]

    connection.execute(
        text("DELETE FROM sys_roles WHERE id = ANY(:ids)"), {"ids": role_ids}
    )
    connection.execute(
        text("DELETE FROM sys_permissions WHERE perm_key = ANY(:keys)"), {"keys": perm_keys}
    )
