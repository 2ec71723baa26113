from __future__ import annotations

import unittest

from realtree.ast import SlotId, format_literal
from realtree.lexer import slot_id_for_letter, tokenize


class LexerAndLiteralCoverageTests(unittest.TestCase):
    def _tokens(self, source: str, *, with_spans: bool = False):
        if with_spans:
            return [(tok.kind, tok.text, tok.pos, tok.end) for tok in tokenize(source) if tok.kind != "EOF"]
        return [(tok.kind, tok.text) for tok in tokenize(source) if tok.kind != "EOF"]

    def test_token_golden_assignment_with_spans(self) -> None:
        self.assertEqual(
            self._tokens("a = 3.5 + b", with_spans=True),
            [
                ("NAME", "a", 0, 1),
                ("ASSIGN", "=", 2, 3),
                ("NUMBER", "3.5", 4, 7),
                ("OP", "+", 8, 9),
                ("NAME", "b", 10, 11),
            ],
        )

    def test_token_golden_operators_and_parens(self) -> None:
        self.assertEqual(
            self._tokens("(-x)*y/z%w"),
            [
                ("LPAREN", "("),
                ("OP", "-"),
                ("NAME", "x"),
                ("RPAREN", ")"),
                ("OP", "*"),
                ("NAME", "y"),
                ("OP", "/"),
                ("NAME", "z"),
                ("OP", "%"),
                ("NAME", "w"),
            ],
        )

    def test_keywords_and_names_are_case_insensitive(self) -> None:
        self.assertEqual(
            self._tokens("EVAL A; Print RESET help Exit"),
            [
                ("EVAL", "eval"),
                ("NAME", "a"),
                ("SEP", ";"),
                ("PRINT", "print"),
                ("RESET", "reset"),
                ("HELP", "help"),
                ("EXIT", "exit"),
            ],
        )

    def test_newlines_and_semicolons_collapse_into_separators(self) -> None:
        self.assertEqual(
            self._tokens("print; reset\nhelp", with_spans=True),
            [
                ("PRINT", "print", 0, 5),
                ("SEP", ";", 5, 6),
                ("RESET", "reset", 7, 12),
                ("SEP", ";", 12, 13),
                ("HELP", "help", 13, 17),
            ],
        )
        self.assertEqual(self._tokens("\r\n;", with_spans=True), [("SEP", ";", 0, 3)])

    def test_number_forms(self) -> None:
        for source in ("3", "3.", "3.25", "0.5", "007"):
            with self.subTest(source=source):
                self.assertEqual(self._tokens(source), [("NUMBER", source)])

    def test_leading_dot_is_not_a_number(self) -> None:
        with self.assertRaises(SyntaxError):
            tokenize(".5")

    def test_multi_letter_words_must_be_keywords(self) -> None:
        with self.assertRaisesRegex(SyntaxError, "Illegal name 'foo'"):
            tokenize("eval foo")

    def test_illegal_characters_are_rejected(self) -> None:
        for source in ("1 $ 2", "a = 1 ^ 2", "é", "x = 1²"):
            with self.subTest(source=source):
                with self.assertRaisesRegex(SyntaxError, "Illegal character"):
                    tokenize(source)

    def test_illegal_characters_can_be_skipped(self) -> None:
        skipped: list[str] = []
        tokens = tokenize("a = 1 ^ 2 $", skipped=skipped)
        self.assertEqual(
            [(tok.kind, tok.text) for tok in tokens],
            [("NAME", "a"), ("ASSIGN", "="), ("NUMBER", "1"), ("NUMBER", "2"), ("EOF", "")],
        )
        self.assertEqual(skipped, ["Illegal character '^' at index 6", "Illegal character '$' at index 10"])

        with self.assertRaisesRegex(SyntaxError, "Illegal name 'foo'"):
            tokenize("eval foo", skipped=[])

    def test_eof_token_always_terminates(self) -> None:
        tokens = tokenize("")
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].kind, "EOF")
        self.assertEqual(tokenize("a")[-1].pos, 1)

    def test_slot_id_for_letter(self) -> None:
        self.assertEqual(slot_id_for_letter("a"), SlotId(0))
        self.assertEqual(slot_id_for_letter("C"), SlotId(2))
        self.assertEqual(slot_id_for_letter("z").name, "z")
        for bad in ("", "ab", "1", "é"):
            with self.subTest(bad=bad):
                with self.assertRaises(SyntaxError):
                    slot_id_for_letter(bad)

    def test_slot_id_rejects_out_of_range_indices(self) -> None:
        self.assertEqual(SlotId(25).name, "z")
        for index in (-1, 26, 100):
            with self.subTest(index=index):
                with self.assertRaises(ValueError):
                    SlotId(index)

    def test_literal_text_is_positional_decimal(self) -> None:
        cases = {
            7.0: "7",
            3.25: "3.25",
            0.1: "0.1",
            -2.5: "-2.5",
            1e20: "100000000000000000000",
            1e-7: "0.0000001",
            -0.0: "(- 0)",
            float("inf"): "(1 / 0)",
            float("-inf"): "(- (1 / 0))",
            float("nan"): "(0 / 0)",
        }
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(format_literal(value), expected)


if __name__ == "__main__":
    unittest.main()
