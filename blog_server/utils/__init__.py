"""
工具模块

提供与业务逻辑无关的通用工具: 树构建, 接口访问描述匹配, Refresh Token 存储
"""

from blog_server.utils.access import match_api_path
from blog_server.utils.token import TokenService
from blog_server.utils.tree import build_tree, flatten_tree

__all__ = [
    "build_tree",
    "flatten_tree",
    "match_api_path",
    "TokenService",
]
