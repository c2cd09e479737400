"""Create RBAC and CMS tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-18 10:02:41.118204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    """创建用户, 角色, 权限, 分类, 标签表"""
    op.create_table(
        "sys_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("nickname", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_sys_users_username", "sys_users", ["username"], unique=True)
    op.create_index("ix_sys_users_email", "sys_users", ["email"], unique=True)

    op.create_table(
        "sys_roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("role_name", sa.String(50), nullable=False, unique=True),
        sa.Column("role_key", sa.String(50), nullable=False),
        sa.Column("role_sort", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("role_desc", sa.String(200), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_builtin", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_sys_roles_role_key", "sys_roles", ["role_key"], unique=True)

    op.create_table(
        "sys_permissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("perm_name", sa.String(50), nullable=False, unique=True),
        sa.Column("perm_key", sa.String(50), nullable=False),
        sa.Column("perm_type", sa.SmallInteger(), nullable=False, server_default="1"),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("path", sa.String(200), nullable=True),
        sa.Column("api_path", sa.String(200), nullable=True),
        sa.Column("component", sa.String(100), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_builtin", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_sys_permissions_perm_key", "sys_permissions", ["perm_key"], unique=True)
    op.create_index("ix_sys_permissions_perm_type", "sys_permissions", ["perm_type"])
    op.create_index("ix_sys_permissions_parent_id", "sys_permissions", ["parent_id"])
    op.create_index("ix_sys_permissions_is_enabled", "sys_permissions", ["is_enabled"])

    op.create_table(
        "sys_user_roles",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("sys_users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("sys_roles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_table(
        "sys_role_permissions",
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("sys_roles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "permission_id",
            sa.Integer(),
            sa.ForeignKey("sys_permissions.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "cms_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("cms_categories.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("category_name", sa.String(50), nullable=False, unique=True),
        sa.Column("category_key", sa.String(50), nullable=False, unique=True),
        sa.Column("path", sa.String(255), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail", sa.String(255), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("seo_title", sa.String(100), nullable=True),
        sa.Column("seo_keywords", sa.String(200), nullable=True),
        sa.Column("seo_description", sa.String(300), nullable=True),
        sa.Column("article_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_cms_categories_parent_id", "cms_categories", ["parent_id"])
    # 前缀查询 (LIKE 'x.%') 需要 text_pattern_ops
    op.create_index(
        "ix_cms_categories_path",
        "cms_categories",
        ["path"],
        postgresql_ops={"path": "text_pattern_ops"},
    )
    op.create_index("ix_cms_categories_sort_order", "cms_categories", ["sort_order"])
    op.create_index("ix_cms_categories_is_visible", "cms_categories", ["is_visible"])

    op.create_table(
        "cms_tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tag_name", sa.String(50), nullable=False, unique=True),
        sa.Column("tag_key", sa.String(50), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail", sa.String(255), nullable=True),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("article_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_cms_tags_is_visible", "cms_tags", ["is_visible"])
    op.create_index("ix_cms_tags_article_count", "cms_tags", ["article_count"])


def downgrade() -> None:
    op.drop_table("cms_tags")
    op.drop_table("cms_categories")
    op.drop_table("sys_role_permissions")
    op.drop_table("sys_user_roles")
    op.drop_table("sys_permissions")
    op.drop_table("sys_roles")
    op.drop_table("sys_users")
