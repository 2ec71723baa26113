"""Structured error types raised while evaluating expression trees."""

from __future__ import annotations

from .ast import SlotId


class RealTreeError(Exception):
    """Base class for structured realtree errors."""


class EvaluationError(RealTreeError):
    """Evaluation of a well-formed tree failed."""


class CycleDetected(EvaluationError):
    """A node was re-entered while its own evaluation was still in progress."""

    def __init__(self, message: str = "Eval has circular dependencies") -> None:
        super().__init__(message)


class UndefinedSlot(EvaluationError):
    """A reference named a slot that holds no expression."""

    def __init__(self, slot: SlotId) -> None:
        super().__init__(f"Slot {slot.name!r} is undefined")
        self.slot = slot


class EvaluationDepthExceeded(EvaluationError):
    """The reference chain was too deep to walk."""


def classify_runtime_exception(err: Exception) -> EvaluationError:
    """Best-effort classification of unexpected failures during evaluation."""
    if isinstance(err, EvaluationError):
        return err
    if isinstance(err, RecursionError):
        return EvaluationDepthExceeded("Eval nesting is too deep")
    return EvaluationError(f"Invalid expression evaluation: {err}")
