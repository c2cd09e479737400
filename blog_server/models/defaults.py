"""
内置角色和默认权限

初始化迁移和 scripts/init_rbac.py 共用这份定义.
权限按 parent_key 引用父权限, 父权限必须排在子权限之前.
写入时全部标记为内置 (is_builtin), 不能删除.
"""

from blog_server.models.permission import PermissionType

SUPER_ADMIN_ROLE_ID = 1

DEFAULT_PERMISSIONS = [
    # 系统管理
    {"perm_key": "system", "perm_name": "系统管理", "perm_type": PermissionType.MENU,
     "parent_key": None, "path": "/system", "icon": "setting", "sort_order": 1},
    {"perm_key": "system:user", "perm_name": "用户管理", "perm_type": PermissionType.MENU,
     "parent_key": "system", "path": "/system/users", "component": "system/user/index",
     "icon": "user", "sort_order": 1},
    {"perm_key": "system:user:api", "perm_name": "用户管理接口", "perm_type": PermissionType.API,
     "parent_key": "system:user", "api_path": "*:/admin/api/v1/users/*", "sort_order": 1},
    {"perm_key": "system:role", "perm_name": "角色管理", "perm_type": PermissionType.MENU,
     "parent_key": "system", "path": "/system/roles", "component": "system/role/index",
     "icon": "team", "sort_order": 2},
    {"perm_key": "system:role:api", "perm_name": "角色管理接口", "perm_type": PermissionType.API,
     "parent_key": "system:role", "api_path": "*:/admin/api/v1/roles/*", "sort_order": 1},
    {"perm_key": "system:permission", "perm_name": "权限管理", "perm_type": PermissionType.MENU,
     "parent_key": "system", "path": "/system/permissions",
     "component": "system/permission/index", "icon": "lock", "sort_order": 3},
    {"perm_key": "system:permission:api", "perm_name": "权限管理接口",
     "perm_type": PermissionType.API, "parent_key": "system:permission",
     "api_path": "*:/admin/api/v1/permissions/*", "sort_order": 1},
    # 内容管理
    {"perm_key": "content", "perm_name": "内容管理", "perm_type": PermissionType.MENU,
     "parent_key": None, "path": "/content", "icon": "read", "sort_order": 2},
    {"perm_key": "content:category", "perm_name": "分类管理", "perm_type": PermissionType.MENU,
     "parent_key": "content", "path": "/content/categories",
     "component": "content/category/index", "icon": "folder", "sort_order": 1},
    {"perm_key": "content:category:api", "perm_name": "分类管理接口",
     "perm_type": PermissionType.API, "parent_key": "content:category",
     "api_path": "*:/admin/api/v1/categories/*", "sort_order": 1},
    {"perm_key": "content:tag", "perm_name": "标签管理", "perm_type": PermissionType.MENU,
     "parent_key": "content", "path": "/content/tags", "component": "content/tag/index",
     "icon": "tags", "sort_order": 2},
    {"perm_key": "content:tag:api", "perm_name": "标签管理接口", "perm_type": PermissionType.API,
     "parent_key": "content:tag", "api_path": "*:/admin/api/v1/tags/*", "sort_order": 1},
]

DEFAULT_ROLES = [
    {
        "id": SUPER_ADMIN_ROLE_ID,
        "role_name": "超级管理员",
        "role_key": "super_admin",
        "role_sort": 0,
        "role_desc": "内置角色, 跳过所有权限检查",
        "is_default": False,
        "permission_keys": [],
    },
    {
        "id": 2,
        "role_name": "管理员",
        "role_key": "admin",
        "role_sort": 1,
        "role_desc": "系统管理和内容管理",
        "is_default": False,
        "permission_keys": [p["perm_key"] for p in DEFAULT_PERMISSIONS],
    },
    {
        "id": 3,
        "role_name": "编辑",
        "role_key": "editor",
        "role_sort": 2,
        "role_desc": "内容管理",
        "is_default": False,
        "permission_keys": [
            "content",
            "content:category",
            "content:category:api",
            "content:tag",
            "content:tag:api",
        ],
    },
    {
        "id": 4,
        "role_name": "普通用户",
        "role_key": "user",
        "role_sort": 3,
        "role_desc": "新注册用户的默认角色",
        "is_default": True,
        "permission_keys": [],
    },
]
