"""A three-dimensional k-d tree with single nearest-neighbour search."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

_DIM = 3

_VISIT = 0
_CHECK = 1
_FAR = 2

Point = tuple[float, float, float]


class _Node:
    __slots__ = ("pos", "data", "dir", "left", "right")

    def __init__(self, pos: Point, data: Any, direction: int) -> None:
        self.pos = pos
        self.data = data
        self.dir = direction
        self.left: _Node | None = None
        self.right: _Node | None = None


def _as_point(pos: Sequence[float]) -> Point:
    return (float(pos[0]), float(pos[1]), float(pos[2]))


def _dist_sq(a: Point, b: Point) -> float:
    return sum((a[i] - b[i]) ** 2 for i in range(_DIM))


def _rect_dist_sq(lo: Point, hi: Point, pos: Point) -> float:
    result = 0.0
    for low, high, value in zip(lo, hi, pos):
        if value < low:
            result += (low - value) ** 2
        elif value > high:
            result += (high - value) ** 2
    return result


def _replace(point: Point, axis: int, value: float) -> Point:
    items = list(point)
    items[axis] = value
    return (items[0], items[1], items[2])


class KdTree:
    """Points in 3D space, each carrying a payload, searchable by proximity."""

    def __init__(self) -> None:
        self._root: _Node | None = None
        self._min: Point | None = None
        self._max: Point | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def insert(self, pos: Sequence[float], data: Any) -> None:
        """Add a point with its payload."""
        point = _as_point(pos)
        if self._root is None:
            self._root = _Node(point, data, 0)
        else:
            node = self._root
            while True:
                axis = node.dir
                new_dir = (axis + 1) % _DIM
                if point[axis] < node.pos[axis]:
                    if node.left is None:
                        node.left = _Node(point, data, new_dir)
                        break
                    node = node.left
                else:
                    if node.right is None:
                        node.right = _Node(point, data, new_dir)
                        break
                    node = node.right

        if self._min is None or self._max is None:
            self._min = point
            self._max = point
        else:
            self._min = tuple(map(min, self._min, point))  # type: ignore[assignment]
            self._max = tuple(map(max, self._max, point))  # type: ignore[assignment]
        self._size += 1

    def nearest(self, pos: Sequence[float]) -> Any:
        """Return the payload of the point closest to ``pos``.

        Raises LookupError when the tree is empty.
        """
        if self._root is None or self._min is None or self._max is None:
            raise LookupError("nearest() on an empty tree")
        target = _as_point(pos)

        best = self._root
        best_dist = _dist_sq(best.pos, target)

        stack: list[tuple[int, _Node, Point, Point]] = [
            (_VISIT, self._root, self._min, self._max)
        ]
        while stack:
            kind, node, lo, hi = stack.pop()
            if kind == _CHECK:
                dist = _dist_sq(node.pos, target)
                if dist < best_dist:
                    best = node
                    best_dist = dist
                continue
            if kind == _FAR:
                if _rect_dist_sq(lo, hi, target) < best_dist:
                    stack.append((_VISIT, node, lo, hi))
                continue

            axis = node.dir
            split = node.pos[axis]
            if target[axis] - split <= 0:
                nearer, farther = node.left, node.right
                near_rect = (lo, _replace(hi, axis, split))
                far_rect = (_replace(lo, axis, split), hi)
            else:
                nearer, farther = node.right, node.left
                near_rect = (_replace(lo, axis, split), hi)
                far_rect = (lo, _replace(hi, axis, split))

            # Pushed in reverse: nearer subtree, then this node, then farther.
            if farther is not None:
                stack.append((_FAR, farther, far_rect[0], far_rect[1]))
            stack.append((_CHECK, node, lo, hi))
            if nearer is not None:
                stack.append((_VISIT, nearer, near_rect[0], near_rect[1]))

        return best.data