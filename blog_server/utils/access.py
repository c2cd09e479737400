"""
接口访问描述匹配

接口类型权限的 api_path 格式为 METHOD:path_pattern:
- METHOD 为 HTTP 方法 (大小写不敏感) 或 * 表示任意方法
- path_pattern 以 /* 结尾时为前缀匹配, 否则要求与请求路径完全一致

示例:
    GET:/admin/api/v1/users/*   匹配 GET /admin/api/v1/users/42
    *:/admin/api/v1/articles/*  匹配任意方法访问文章接口
    POST:/admin/api/v1/tags     只匹配 POST /admin/api/v1/tags
"""

from typing import Optional, Tuple

WILDCARD_METHOD = "*"
PREFIX_SUFFIX = "/*"


def split_access_descriptor(descriptor: str) -> Optional[Tuple[str, str]]:
    """
    按第一个冒号拆分访问描述

    Returns:
        (method, path_pattern), 格式不正确时返回 None
    """
    parts = descriptor.split(":", 1)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def match_method(perm_method: str, request_method: str) -> bool:
    perm_method = perm_method.upper()
    return perm_method == WILDCARD_METHOD or perm_method == request_method.upper()


def match_path(path_pattern: str, request_path: str) -> bool:
    if path_pattern.endswith(PREFIX_SUFFIX):
        return request_path.startswith(path_pattern[: -len(PREFIX_SUFFIX)])
    return path_pattern == request_path


def match_api_path(descriptor: str, request_path: str, request_method: str) -> bool:
    """
    检查接口访问描述是否匹配当前请求

    Args:
        descriptor: 权限的 api_path, 格式 METHOD:path_pattern
        request_path: 请求路径
        request_method: 请求方法

    Returns:
        bool: 是否匹配, 描述格式不正确时视为不匹配
    """
    parts = split_access_descriptor(descriptor)
    if parts is None:
        return False

    perm_method, path_pattern = parts
    if not match_method(perm_method, request_method):
        return False
    return match_path(path_pattern, request_path)
