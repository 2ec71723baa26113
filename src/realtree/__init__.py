"""realtree public API."""

from .ast import (
    SLOT_COUNT,
    Binary,
    BinaryOp,
    Literal,
    Node,
    Reference,
    SlotId,
    Unary,
    UnaryOp,
    render,
)
from .errors import (
    CycleDetected,
    EvaluationDepthExceeded,
    EvaluationError,
    RealTreeError,
    UndefinedSlot,
)
from .evaluator import CycleGuard, evaluate
from .parser import ParseError, parse_expression, parse_line
from .session import CommandResult, EvalOutcome, Session, SlotListing
from .slots import SlotTable

__all__ = [
    "SLOT_COUNT",
    "Binary",
    "BinaryOp",
    "Literal",
    "Node",
    "Reference",
    "SlotId",
    "Unary",
    "UnaryOp",
    "render",
    "parse_expression",
    "parse_line",
    "ParseError",
    "evaluate",
    "CycleGuard",
    "SlotTable",
    "Session",
    "EvalOutcome",
    "SlotListing",
    "CommandResult",
    "RealTreeError",
    "EvaluationError",
    "CycleDetected",
    "UndefinedSlot",
    "EvaluationDepthExceeded",
]
