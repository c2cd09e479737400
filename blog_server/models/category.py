"""
分类数据库模型
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, SmallInteger, String, Text, text

from blog_server.core.db import Base

# 物化路径中祖先ID的分隔符, 与 PostgreSQL ltree 的标签分隔符一致
PATH_SEPARATOR = "."


class Category(Base):
    """
    分类模型

    path 保存从根到自身的ID序列 (如 "1.4.9"), 由分类服务在写入时维护,
    用于不构建整棵树的情况下做子孙分类的前缀查询
    """

    __tablename__ = "cms_categories"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(
        Integer,
        ForeignKey("cms_categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="父分类ID",
    )
    category_name = Column(String(50), unique=True, nullable=False, comment="分类名称")
    category_key = Column(String(50), unique=True, nullable=False, comment="分类标识，URL友好")
    path = Column(String(255), nullable=False, default="", index=True, comment="物化路径")
    description = Column(Text, nullable=True, comment="分类描述")
    thumbnail = Column(String(255), nullable=True, comment="缩略图URL")
    icon = Column(String(100), nullable=True, comment="图标")
    sort_order = Column(SmallInteger, nullable=False, default=0, index=True, comment="排序")
    is_visible = Column(Boolean, nullable=False, default=True, index=True, comment="前台是否可见")
    seo_title = Column(String(100), nullable=True)
    seo_keywords = Column(String(200), nullable=True)
    seo_description = Column(String(300), nullable=True)
    # 由文章-分类关联表的触发器维护
    article_count = Column(Integer, nullable=False, default=0, comment="文章数量")
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=text("now()"), comment="创建时间"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=text("now()"),
        comment="更新时间",
    )

    def __repr__(self):
        return f"<Category(id={self.id}, path={self.path})>"
