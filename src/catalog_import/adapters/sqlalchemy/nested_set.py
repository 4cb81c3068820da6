"""Global recomputation of the nested-set (left/right bound) encoding.

The encoding is never maintained incrementally. After any bulk change the
whole tree is walked again from its roots: siblings are ordered by
``(position, id)``, nodes whose parent does not exist are treated as roots, and
nodes caught in a parent cycle are detached so every node gets bounds.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class TreeNode:
    id: int
    parent_id: int | None = None
    position: int | None = None


@dataclass(slots=True)
class NestedIntervals:
    bounds: dict[int, tuple[int, int]] = field(default_factory=dict[int, tuple[int, int]])
    # nodes that had to be turned into roots to keep the encoding consistent
    detached: set[int] = field(default_factory=set[int])


def _sibling_order(node: TreeNode) -> tuple[bool, int, int]:
    return (node.position is None, node.position or 0, node.id)


def compute_nested_intervals(nodes: Iterable[TreeNode]) -> NestedIntervals:
    """Assign ``(lft, rgt)`` to every node, numbering from 1 in depth-first order."""

    by_id = {node.id: node for node in nodes}
    result = NestedIntervals()
    children: defaultdict[int | None, list[TreeNode]] = defaultdict(list)
    for node in by_id.values():
        parent_id = node.parent_id
        if parent_id is not None and (parent_id not in by_id or parent_id == node.id):
            result.detached.add(node.id)
            parent_id = None
        children[parent_id].append(node)
    for siblings in children.values():
        siblings.sort(key=_sibling_order)

    counter = 1
    for root in list(children[None]):
        counter = _walk(root, children, result.bounds, counter)

    # whatever is left is only reachable through a cycle
    for node in sorted(by_id.values(), key=_sibling_order):
        if node.id in result.bounds:
            continue
        result.detached.add(node.id)
        counter = _walk(node, children, result.bounds, counter)

    return result


def _walk(
    root: TreeNode,
    children: dict[int | None, list[TreeNode]],
    bounds: dict[int, tuple[int, int]],
    counter: int,
) -> int:
    lefts = {root.id: counter}
    counter += 1
    stack: list[tuple[TreeNode, Iterator[TreeNode]]] = [(root, iter(children.get(root.id, ())))]
    while stack:
        node, pending = stack[-1]
        child = next(pending, None)
        if child is None:
            stack.pop()
            bounds[node.id] = (lefts[node.id], counter)
            counter += 1
            continue
        if child.id in lefts or child.id in bounds:
            continue
        lefts[child.id] = counter
        counter += 1
        stack.append((child, iter(children.get(child.id, ()))))
    return counter
