"""Parser for the J subset.

The grammar has no precedence: every verb takes the whole remainder of the
line as its right argument, so ``3+4+5`` parses as ``3+(4+5)``.

    expr    := VERB expr | primary VERB expr | primary '=' expr | primary
    primary := NUMBER | NAME | '(' expr ')'
"""

from __future__ import annotations

from dataclasses import dataclass

from .ast import Assign, Expr, Infix, Name, Noun, Prefix
from .lexer import Token, tokenize

_PRIMARY_START = ("NUMBER", "NAME", "LPAREN")
_AFTER_PRIMARY = {"VERB", "ASSIGN", "RPAREN", "EOF"}


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

    def parse_line(self) -> Expr | None:
        if self._peek().kind == "EOF":
            return None
        expr = self._parse_expression()
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
        if message is not None:
            detail = message
        elif token.kind == "UNKNOWN":
            detail = f"Unexpected character {token.text!r}"
        else:
            detail = "Unexpected token"
        normalized_expected = tuple(dict.fromkeys(expected))
        if token.kind == "EOF":
            found = "EOF"
        else:
            found = f"{token.kind}({token.text})"
        raise ParseError(detail, token.pos, token.end, expected=normalized_expected, found=found)

    def _parse_expression(self) -> Expr:
        # Each verb or '=' opens a node whose right side is the rest of the
        # expression; collect them left to right, then fold from the right.
        heads: list[tuple[str, str, Expr | None]] = []
        while True:
            tok = self._peek()
            if tok.kind == "VERB":
                self._advance()
                heads.append(("prefix", tok.text, None))
                continue

            left = self._parse_primary()

            tok = self._peek()
            if tok.kind == "VERB":
                self._advance()
                heads.append(("infix", tok.text, left))
                continue
            if tok.kind == "ASSIGN":
                if not isinstance(left, Name):
                    self._error(tok, message="Assignment target must be a variable name")
                self._advance()
                heads.append(("assign", tok.text, left))
                continue
            if tok.kind not in _AFTER_PRIMARY:
                message = "Unknown verb" if tok.kind == "UNKNOWN" else None
                self._error(tok, message=message, expected=("VERB", "ASSIGN"))
            break

        expr = left
        for form, op, target in reversed(heads):
            if form == "prefix":
                expr = Prefix(op=op, right=expr)
            elif form == "infix":
                expr = Infix(op=op, left=target, right=expr)
            else:
                expr = Assign(target=target, right=expr)
        return expr

    def _parse_primary(self) -> Expr:
        tok = self._peek()
        if tok.kind == "NUMBER":
            self._advance()
            return Noun(value=int(tok.text))
        if tok.kind == "NAME":
            self._advance()
            return Name(value=tok.text)
        if tok.kind == "LPAREN":
            self._advance()
            inner = self._parse_expression()
            self._expect("RPAREN")
            return inner
        self._error(tok, expected=(*_PRIMARY_START, "VERB"))
        raise AssertionError("unreachable")


def parse(source: str) -> Expr | None:
    """Parse one line; a blank line yields ``None``."""
    tokens = tokenize(source)
    parser = _Parser(tokens=tokens)
    return parser.parse_line()
