"""Tokenization for the RealTree command language."""

from __future__ import annotations

from dataclasses import dataclass

from .ast import SlotId


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
    "=": "ASSIGN",
    "+": "OP",
    "-": "OP",
    "*": "OP",
    "/": "OP",
    "%": "OP",
}

_SEPARATORS = {"\n", "\r", ";"}

_KEYWORDS = {
    "eval": "EVAL",
    "exit": "EXIT",
    "help": "HELP",
    "reset": "RESET",
    "print": "PRINT",
}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _scan_while(source: str, start: int, predicate) -> tuple[str, int]:
    i = start
    while i < len(source) and predicate(source[i]):
        i += 1
    return source[start:i], i


def _scan_number(source: str, start: int) -> tuple[str, int]:
    _, i = _scan_while(source, start, _is_digit)
    if i < len(source) and source[i] == ".":
        _, i = _scan_while(source, i + 1, _is_digit)
    return source[start:i], i


def slot_id_for_letter(letter: str) -> SlotId:
    """Map a (case-insensitive) ASCII letter onto its slot."""
    if len(letter) != 1 or not _is_letter(letter):
        raise SyntaxError(f"Illegal name {letter!r}")
    return SlotId(ord(letter.lower()) - ord("a"))


def tokenize(source: str, *, skipped: list[str] | None = None) -> list[Token]:
    """Split ``source`` into tokens ending with ``EOF``.

    Illegal characters raise ``SyntaxError`` unless ``skipped`` is given, in
    which case each one is reported there and scanning continues past it.
    Multi-letter words that are not keywords always raise.
    """
    tokens: list[Token] = []
    i = 0

    while i < len(source):
        ch = source[i]

        if ch in _SEPARATORS:
            start = i
            while i < len(source) and source[i] in _SEPARATORS:
                i += 1
            tokens.append(Token("SEP", ";", start, i))
            continue

        if ch.isspace():
            i += 1
            continue

        if _is_digit(ch):
            text, end = _scan_number(source, i)
            tokens.append(Token("NUMBER", text, i, end))
            i = end
            continue

        if _is_letter(ch):
            word, end = _scan_while(source, i, _is_letter)
            word = word.lower()
            if word in _KEYWORDS:
                tokens.append(Token(_KEYWORDS[word], word, i, end))
            elif len(word) == 1:
                tokens.append(Token("NAME", word, i, end))
            else:
                raise SyntaxError(f"Illegal name {word!r} at index {i}")
            i = end
            continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i += 1
            continue

        message = f"Illegal character {ch!r} at index {i}"
        if skipped is None:
            raise SyntaxError(message)
        skipped.append(message)
        i += 1

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
