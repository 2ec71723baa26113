"""Recursive-descent parser for RealTree commands and expressions."""

from __future__ import annotations

from dataclasses import dataclass

from .ast import (
    AssignCommand,
    Binary,
    BinaryOp,
    Command,
    EvalCommand,
    ExitCommand,
    HelpCommand,
    Literal,
    Node,
    PrintCommand,
    Reference,
    ResetCommand,
    Unary,
    UnaryOp,
)
from .lexer import Token, slot_id_for_letter, tokenize

_ADDITIVE_OPS = {"+": BinaryOp.ADD, "-": BinaryOp.SUB}
_MULTIPLICATIVE_OPS = {"*": BinaryOp.MUL, "/": BinaryOp.DIV, "%": BinaryOp.REM}

_NULLARY_COMMANDS = {
    "PRINT": PrintCommand,
    "RESET": ResetCommand,
    "HELP": HelpCommand,
    "EXIT": ExitCommand,
}

_EXPR_EXPECTED = ("NUMBER", "NAME", "LPAREN", "OP(-)")
_COMMAND_EXPECTED = ("NAME", "EVAL", "PRINT", "RESET", "HELP", "EXIT")


class ParseError(SyntaxError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


@dataclass
class _Parser:
    tokens: list[Token]
    index: int = 0

    def parse_line(self) -> tuple[Command, ...]:
        commands: list[Command] = []
        self._consume_separators()
        while self._peek().kind != "EOF":
            commands.append(self._parse_command())
            if self._peek().kind != "EOF":
                self._expect("SEP")
            self._consume_separators()
        return tuple(commands)

    def parse_expression_only(self) -> Node:
        expr = self._parse_expr()
        self._expect("EOF")
        return expr

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _expect(self, kind: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            self._error(tok, expected=(kind,))
        return self._advance()

    def _error(self, tok: Token | None = None, *, message: str | None = None, expected: tuple[str, ...] = ()) -> None:
        token = tok if tok is not None else self._peek()
        detail = message if message is not None else "Unexpected token"
        normalized_expected = tuple(dict.fromkeys(expected))
        if token.kind == "EOF":
            found = "EOF"
        elif token.text:
            found = f"{token.kind}({token.text})"
        else:
            found = token.kind
        raise ParseError(detail, token.pos, token.end, expected=normalized_expected, found=found)

    def _consume_separators(self) -> None:
        while self._peek().kind == "SEP":
            self._advance()

    def _parse_command(self) -> Command:
        tok = self._peek()

        if tok.kind == "NAME":
            self._advance()
            self._expect("ASSIGN")
            return AssignCommand(slot=slot_id_for_letter(tok.text), expr=self._parse_expr())

        if tok.kind == "EVAL":
            self._advance()
            return EvalCommand(expr=self._parse_expr())

        command_type = _NULLARY_COMMANDS.get(tok.kind)
        if command_type is not None:
            self._advance()
            return command_type()

        self._error(tok, message="Expected a command", expected=_COMMAND_EXPECTED)
        raise AssertionError("unreachable")

    def _parse_expr(self) -> Node:
        left = self._parse_term()
        while self._peek().kind == "OP" and self._peek().text in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self._advance().text]
            left = Binary(op=op, left=left, right=self._parse_term())
        return left

    def _parse_term(self) -> Node:
        left = self._parse_factor()
        while self._peek().kind == "OP" and self._peek().text in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self._advance().text]
            left = Binary(op=op, left=left, right=self._parse_factor())
        return left

    def _parse_factor(self) -> Node:
        tok = self._peek()

        if tok.kind == "OP" and tok.text == "-":
            self._advance()
            return Unary(op=UnaryOp.NEGATE, child=self._parse_factor())

        if tok.kind == "NUMBER":
            self._advance()
            return Literal(value=float(tok.text))

        if tok.kind == "NAME":
            self._advance()
            return Reference(slot=slot_id_for_letter(tok.text))

        if tok.kind == "LPAREN":
            self._advance()
            expr = self._parse_expr()
            self._expect("RPAREN")
            return expr

        self._error(tok, message="Expected an expression", expected=_EXPR_EXPECTED)
        raise AssertionError("unreachable")


def parse_line(source: str, *, skipped: list[str] | None = None) -> tuple[Command, ...]:
    """Parse one input line; ``skipped`` collects illegal characters instead of raising."""
    tokens = tokenize(source, skipped=skipped)
    parser = _Parser(tokens=tokens)
    return parser.parse_line()


def parse_expression(source: str) -> Node:
    tokens = tokenize(source)
    parser = _Parser(tokens=tokens)
    return parser.parse_expression_only()
