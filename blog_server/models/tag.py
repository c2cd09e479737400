"""
标签数据库模型
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, SmallInteger, String, Text, text

from blog_server.core.db import Base


class Tag(Base):
    """标签模型"""

    __tablename__ = "cms_tags"

    id = Column(Integer, primary_key=True, index=True)
    tag_name = Column(String(50), unique=True, nullable=False, comment="标签名称")
    tag_key = Column(String(50), unique=True, nullable=False, comment="标签标识，URL友好")
    description = Column(Text, nullable=True, comment="标签描述")
    thumbnail = Column(String(255), nullable=True, comment="缩略图URL")
    sort_order = Column(SmallInteger, nullable=False, default=0, comment="排序")
    is_visible = Column(Boolean, nullable=False, default=True, index=True, comment="前台是否可见")
    # 由文章-标签关联表的触发器维护
    article_count = Column(Integer, nullable=False, default=0, index=True, comment="文章数量")
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
        return f"<Tag(id={self.id}, tag_key={self.tag_key})>"
