"""
树结构构建工具

权限菜单树和分类树共用同一个构建算法: 先建立 ID -> 节点 的映射, 再把每个节点挂到父节点的 children 下.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol, TypeVar


class TreeNode(Protocol):
    """可构建为树的节点, 需要具备 id, parent_id, children 三个属性"""

    id: Any
    parent_id: Optional[Any]
    children: List[Any]


NodeT = TypeVar("NodeT", bound=TreeNode)


def is_root_node(parent_id: Optional[Any]) -> bool:
    """parent_id 为 None 或 0 都表示根节点"""
    return parent_id is None or parent_id == 0


def build_tree(nodes: Iterable[NodeT], promote_orphans: bool = False) -> List[NodeT]:
    """
    将扁平节点列表构建为树

    - 子节点顺序与输入顺序一致, 排序由调用方在查询时完成 (sort_order, id)
    - 同一个 ID 出现多次时只保留第一次出现的节点
    - 父节点不在输入中的孤儿节点默认丢弃, promote_orphans=True 时作为根节点返回
    - 每个节点最多挂载一次, 存在环的节点从任何根都不可达, 不会出现在结果中

    Args:
        nodes: 节点列表, 节点的 children 应为空列表
        promote_orphans: 是否把孤儿节点提升为根节点

    Returns:
        List: 根节点列表
    """
    node_map: Dict[Any, NodeT] = {}
    for node in nodes:
        node_map.setdefault(node.id, node)

    roots: List[NodeT] = []
    for node in node_map.values():
        if is_root_node(node.parent_id):
            roots.append(node)
            continue

        parent = node_map.get(node.parent_id)
        if parent is None:
            if promote_orphans:
                roots.append(node)
            continue
        if parent is node:
            # 自身为父节点, 无法挂载
            continue
        parent.children.append(node)

    return roots


def flatten_tree(roots: Iterable[NodeT]) -> List[NodeT]:
    """按深度优先顺序展开树, 用于校验和导出"""
    result: List[NodeT] = []
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(node.children))
    return result
