from __future__ import annotations

import math
import sys
import unittest

from realtree.ast import Literal, Reference, SlotId, Unary, UnaryOp
from realtree.errors import CycleDetected, EvaluationDepthExceeded, UndefinedSlot
from realtree.parser import parse_expression, parse_line
from realtree.session import HELP_TEXT, EvalOutcome, Session, format_value

A, B, C, Z = SlotId(0), SlotId(1), SlotId(2), SlotId(25)


class SessionSurfaceTests(unittest.TestCase):
    def test_assign_eval_and_cycle_walkthrough(self) -> None:
        session = Session()
        session.assign(A, parse_expression("3 + 4"))
        self.assertEqual(session.evaluate_and_display(Reference(A)).unwrap(), 7.0)

        session.assign(B, parse_expression("a * 2"))
        self.assertEqual(session.evaluate_and_display(Reference(B)).unwrap(), 14.0)

        session.assign(A, parse_expression("b"))
        for slot in (A, B):
            with self.subTest(slot=slot.name):
                outcome = session.evaluate_and_display(Reference(slot))
                self.assertFalse(outcome.ok)
                self.assertIsInstance(outcome.error, CycleDetected)
                with self.assertRaises(CycleDetected):
                    outcome.unwrap()

        self.assertEqual(len(session.guard), 0)
        self.assertEqual(session.evaluate_and_display(parse_expression("2 + 2")).unwrap(), 4.0)

    def test_non_finite_results_are_values_not_errors(self) -> None:
        session = Session()
        cases = {"1 / 0": "Infinity", "-1 / 0": "-Infinity", "0 / 0": "NaN"}
        for source, expected in cases.items():
            with self.subTest(source=source):
                outcome = session.evaluate_and_display(parse_expression(source))
                self.assertTrue(outcome.ok)
                self.assertEqual(outcome.display(), expected)
        self.assertEqual(session.evaluate_and_display(parse_expression("1 / 0")).value, math.inf)

    def test_undefined_slot_outcome(self) -> None:
        outcome = Session().evaluate_and_display(Reference(C))
        self.assertIsInstance(outcome.error, UndefinedSlot)
        self.assertEqual(outcome.display(), "Slot 'c' is undefined")

    def test_reset_empties_every_slot(self) -> None:
        session = Session()
        session.assign(A, Literal(1.0))
        session.assign(Z, parse_expression("a + 1"))
        session.reset()

        self.assertEqual(len(session.slots), 0)
        for slot in (A, Z):
            with self.subTest(slot=slot.name):
                self.assertIsInstance(session.evaluate_and_display(Reference(slot)).error, UndefinedSlot)

    def test_listing_is_ascending_and_reports_cycles_per_slot(self) -> None:
        session = Session()
        session.assign(Z, parse_expression("c * 2"))
        session.assign(C, parse_expression("1 + 2"))
        session.assign(A, parse_expression("a"))

        listings = session.render_all_nonempty_slots()
        self.assertEqual([listing.slot for listing in listings], [A, C, Z])
        self.assertEqual([listing.text for listing in listings], ["a", "(1 + 2)", "(c * 2)"])

        self.assertIsInstance(listings[0].outcome.error, CycleDetected)
        self.assertEqual(listings[1].outcome.unwrap(), 3.0)
        self.assertEqual(listings[2].outcome.unwrap(), 6.0)
        self.assertEqual(len(session.guard), 0)

    def test_deep_chain_is_reported_as_depth_error(self) -> None:
        node = Literal(1.0)
        for _ in range(sys.getrecursionlimit() * 2):
            node = Unary(op=UnaryOp.NEGATE, child=node)

        session = Session()
        outcome = session.evaluate_and_display(node)
        self.assertIsInstance(outcome.error, EvaluationDepthExceeded)
        self.assertEqual(len(session.guard), 0)

    def test_execute_dispatches_parsed_commands(self) -> None:
        session = Session()
        results = [session.execute(command) for command in parse_line("x = 2; eval x * 3; print; help; reset; exit")]

        assign, evaluated, printed, helped, reset, exited = results
        self.assertIsNone(assign.outcome)
        self.assertEqual(evaluated.outcome.unwrap(), 6.0)  # type: ignore[union-attr]
        self.assertEqual([(listing.slot.name, listing.text) for listing in printed.listings], [("x", "2")])
        self.assertEqual(helped.help_text, HELP_TEXT)
        self.assertFalse(reset.exit_requested)
        self.assertTrue(exited.exit_requested)
        self.assertEqual(len(session.slots), 0)

    def test_outcome_holds_exactly_one_of_value_or_error(self) -> None:
        with self.assertRaises(ValueError):
            EvalOutcome()
        with self.assertRaises(ValueError):
            EvalOutcome(value=1.0, error=CycleDetected())

    def test_format_value(self) -> None:
        cases = {7.0: "7", -3.0: "-3", 2.5: "2.5", 0.1 + 0.2: "0.30000000000000004", 1e20: "1e+20"}
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(format_value(value), expected)


if __name__ == "__main__":
    unittest.main()
