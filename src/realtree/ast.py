"""AST nodes and parsed commands for the RealTree calculator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Final, Union

SLOT_COUNT: Final[int] = 26


@dataclass(frozen=True, order=True)
class SlotId:
    """Validated index of one of the named slots ``a`` .. ``z``."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < SLOT_COUNT:
            raise ValueError(f"slot index must be in [0, {SLOT_COUNT}), got {self.index}")

    @property
    def name(self) -> str:
        return chr(ord("a") + self.index)


class UnaryOp(str, Enum):
    NEGATE = "-"


class BinaryOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"


# Nodes compare by identity: the cycle guard tracks node instances, and two
# structurally equal trees stored in different slots are different nodes.


@dataclass(frozen=True, eq=False)
class Literal:
    value: float


@dataclass(frozen=True, eq=False)
class Reference:
    slot: SlotId


@dataclass(frozen=True, eq=False)
class Unary:
    op: UnaryOp
    child: "Node"


@dataclass(frozen=True, eq=False)
class Binary:
    op: BinaryOp
    left: "Node"
    right: "Node"


Node = Union[Literal, Reference, Unary, Binary]


@dataclass(frozen=True)
class AssignCommand:
    slot: SlotId
    expr: Node


@dataclass(frozen=True)
class EvalCommand:
    expr: Node


@dataclass(frozen=True)
class PrintCommand:
    pass


@dataclass(frozen=True)
class ResetCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class ExitCommand:
    pass


Command = Union[AssignCommand, EvalCommand, PrintCommand, ResetCommand, HelpCommand, ExitCommand]


def format_literal(value: float) -> str:
    """Literal text the parser reads back to ``value``; never uses exponent notation.

    Non-finite values have no literal syntax and are written as the quotient
    that produces them.
    """
    if math.isnan(value):
        return "(0 / 0)"
    if math.isinf(value):
        return "(1 / 0)" if value > 0 else "(- (1 / 0))"
    if value == 0 and math.copysign(1.0, value) < 0:
        return "(- 0)"
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def render(node: Node) -> str:
    """Fully parenthesized text of ``node``; references are not resolved."""
    if isinstance(node, Literal):
        return format_literal(node.value)

    if isinstance(node, Reference):
        return node.slot.name

    if isinstance(node, Unary):
        return f"({node.op.value} {render(node.child)})"

    if isinstance(node, Binary):
        return f"({render(node.left)} {node.op.value} {render(node.right)})"

    raise TypeError(f"Unsupported expression node: {type(node)!r}")
