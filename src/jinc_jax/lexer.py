"""Tokenization for the single-character J subset."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


VERB_GLYPHS = frozenset("+{~<#,")

_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
    "=": "ASSIGN",
}


def _is_name_char(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into one token per significant character.

    Every token is exactly one character wide: digits are nouns, letters
    are variable names (case-folded to lowercase), and the verb glyphs,
    parentheses and ``=`` stand for themselves. Whitespace separates
    nothing and is dropped. Any other character becomes an ``UNKNOWN``
    token so the parser can report it with its span.
    """
    tokens: list[Token] = []
    for i, ch in enumerate(source):
        if ch.isspace():
            continue

        if "0" <= ch <= "9":
            tokens.append(Token("NUMBER", ch, i, i + 1))
            continue

        if _is_name_char(ch):
            tokens.append(Token("NAME", ch.lower(), i, i + 1))
            continue

        if ch in VERB_GLYPHS:
            tokens.append(Token("VERB", ch, i, i + 1))
            continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            continue

        tokens.append(Token("UNKNOWN", ch, i, i + 1))

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
