"""Command dispatch surface: the slot table plus the evaluator."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .ast import (
    AssignCommand,
    Command,
    EvalCommand,
    ExitCommand,
    HelpCommand,
    Node,
    PrintCommand,
    ResetCommand,
    SlotId,
    render,
)
from .errors import EvaluationError, classify_runtime_exception
from .evaluator import CycleGuard, evaluate
from .slots import SlotTable

logger = logging.getLogger(__name__)

HELP_TEXT = """\
RealTree: there are 26 variables named 'a' .. 'z'. Names are case insensitive,
and expressions may reference literals or variables. Variables are either empty
or contain expression trees. Literals are a trivial case of a valid tree.
Commands are separated by newlines, or by semicolons ';'.  Valid commands are --
    > help              // print this notice.
    > exit              // exit the program. ^C works as well.
    > print             // prints the value of each valid variable.
    > reset             // clears all variables
    > eval expression   // evaluate the expression
    > eval x            // x is a variable containing an expression tree
    > x = expression    // store the expression tree in variable x."""


def format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class EvalOutcome:
    """Either the value of an evaluation or the error that stopped it."""

    value: float | None = None
    error: EvaluationError | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("EvalOutcome holds exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> float:
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value

    def display(self) -> str:
        if self.error is not None:
            return str(self.error)
        assert self.value is not None
        return format_value(self.value)


@dataclass(frozen=True)
class SlotListing:
    slot: SlotId
    text: str
    outcome: EvalOutcome


@dataclass(frozen=True)
class CommandResult:
    """What a single command produced, for the caller to present."""

    outcome: EvalOutcome | None = None
    listings: tuple[SlotListing, ...] = ()
    help_text: str | None = None
    exit_requested: bool = False


@dataclass
class Session:
    """One interactive session: owns the slot table and its cycle guard."""

    slots: SlotTable = field(default_factory=SlotTable)
    guard: CycleGuard = field(default_factory=CycleGuard)

    def assign(self, slot: SlotId, tree: Node) -> None:
        self.slots.set(slot, tree)
        logger.debug("assigned slot %s", slot.name)

    def evaluate_and_display(self, tree: Node) -> EvalOutcome:
        try:
            value = evaluate(tree, self.slots, guard=self.guard)
        except EvaluationError as err:
            logger.debug("evaluation failed: %s", err)
            return EvalOutcome(error=err)
        except RecursionError as err:
            classified = classify_runtime_exception(err)
            logger.debug("evaluation failed: %s", classified)
            return EvalOutcome(error=classified)
        return EvalOutcome(value=value)

    def reset(self) -> None:
        self.slots.clear_all()
        logger.debug("all slots cleared")

    def render_all_nonempty_slots(self) -> list[SlotListing]:
        return [
            SlotListing(slot=slot, text=render(tree), outcome=self.evaluate_and_display(tree))
            for slot, tree in self.slots.occupied()
        ]

    def execute(self, command: Command) -> CommandResult:
        if isinstance(command, AssignCommand):
            self.assign(command.slot, command.expr)
            return CommandResult()

        if isinstance(command, EvalCommand):
            return CommandResult(outcome=self.evaluate_and_display(command.expr))

        if isinstance(command, PrintCommand):
            return CommandResult(listings=tuple(self.render_all_nonempty_slots()))

        if isinstance(command, ResetCommand):
            self.reset()
            return CommandResult()

        if isinstance(command, HelpCommand):
            return CommandResult(help_text=HELP_TEXT)

        if isinstance(command, ExitCommand):
            return CommandResult(exit_requested=True)

        raise TypeError(f"Unsupported command: {type(command)!r}")
