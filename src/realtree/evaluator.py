"""Evaluator for RealTree expression trees on NumPy float64 scalars."""

from __future__ import annotations

from typing import Callable, Final

import numpy as np

from .ast import Binary, BinaryOp, Literal, Node, Reference, Unary, UnaryOp
from .errors import CycleDetected, UndefinedSlot
from .slots import SlotTable

_BASE_UNARY_OPS: Final[dict[UnaryOp, Callable[[np.float64], np.float64]]] = {
    UnaryOp.NEGATE: lambda x: -x,
}

# IEEE-754 semantics throughout, subnormals included: x / 0 is +-inf or nan,
# never an error. REM is the truncating remainder (sign of the dividend).
_BASE_BINARY_OPS: Final[dict[BinaryOp, Callable[[np.float64, np.float64], np.float64]]] = {
    BinaryOp.ADD: lambda l, r: l + r,
    BinaryOp.SUB: lambda l, r: l - r,
    BinaryOp.MUL: lambda l, r: l * r,
    BinaryOp.DIV: lambda l, r: l / r,
    BinaryOp.REM: lambda l, r: np.fmod(l, r),
}


def _unary_kernel(op: UnaryOp) -> Callable[[np.float64], np.float64]:
    return _BASE_UNARY_OPS[op]


def _binary_kernel(op: BinaryOp) -> Callable[[np.float64, np.float64], np.float64]:
    return _BASE_BINARY_OPS[op]


def _as_scalar(value: float) -> np.float64:
    return np.float64(value)


class CycleGuard:
    """Per-node "evaluation in progress" markers.

    A node's marker is set exactly while a frame evaluating that node instance
    is on the stack. Markers are keyed by node identity, so they detect
    re-entry of the same instance. That coincides with "a slot references
    itself" only because trees are never shared between slots; storing one
    subtree instance in several slots would couple their cycle detection.
    """

    def __init__(self) -> None:
        # Insertion-ordered set of marked nodes.
        self.active: dict[Node, None] = {}

    def is_active(self, node: Node) -> bool:
        return node in self.active

    def __len__(self) -> int:
        return len(self.active)


def _eval_node(node: Node, slots: SlotTable, guard: CycleGuard) -> np.float64:
    active = guard.active
    if node in active:
        raise CycleDetected()
    active[node] = None
    try:
        if isinstance(node, Literal):
            return _as_scalar(node.value)

        if isinstance(node, Reference):
            target = slots.get(node.slot)
            if target is None:
                raise UndefinedSlot(node.slot)
            return _eval_node(target, slots, guard)

        if isinstance(node, Unary):
            child = _eval_node(node.child, slots, guard)
            return _unary_kernel(node.op)(child)

        if isinstance(node, Binary):
            left = _eval_node(node.left, slots, guard)
            right = _eval_node(node.right, slots, guard)
            return _binary_kernel(node.op)(left, right)

        raise TypeError(f"Unsupported expression node: {type(node)!r}")
    finally:
        # No calls here: release must succeed while unwinding a RecursionError.
        del active[node]


def evaluate(node: Node, slots: SlotTable, *, guard: CycleGuard | None = None) -> float:
    """Evaluate ``node``, resolving references through ``slots``.

    Raises ``CycleDetected`` when a node is re-entered before its evaluation
    completes and ``UndefinedSlot`` for references to empty slots. Every
    marker taken in ``guard`` is released again, however evaluation exits.
    """
    if guard is None:
        guard = CycleGuard()
    with np.errstate(divide="ignore", over="ignore", under="ignore", invalid="ignore"):
        return float(_eval_node(node, slots, guard))
