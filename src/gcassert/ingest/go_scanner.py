"""Lexical scanner for Go source files.

The scanner keeps comments as tokens and inserts the automatic semicolons the
Go grammar defines, so that the syntax layer can split statements and group
comments the way the Go parser does. It never raises: malformed input yields
ILLEGAL tokens or truncated literals, and the compiler reports the real error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import re


class TokenKind(StrEnum):
    IDENT = "ident"
    KEYWORD = "keyword"
    NUMBER = "number"
    RUNE = "rune"
    STRING = "string"
    OPERATOR = "operator"
    SEMICOLON = "semicolon"
    COMMENT = "comment"
    ILLEGAL = "illegal"


GO_KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)

_SEMICOLON_KEYWORDS = frozenset({"break", "continue", "fallthrough", "return"})
_SEMICOLON_OPERATORS = frozenset({"++", "--", ")", "]", "}"})

_OPERATORS: tuple[str, ...] = tuple(
    sorted(
        (
            "<<=", ">>=", "&^=", "...",
            "&&", "||", "<-", "++", "--", "==", "!=", "<=", ">=", ":=",
            "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "&^",
            "+", "-", "*", "/", "%", "&", "|", "^", "<", ">", "=", "!", "~",
            "(", ")", "[", "]", "{", "}", ",", ".", ":",
        ),
        key=len,
        reverse=True,
    )
)

_IDENT_RE = re.compile(r"[^\W\d]\w*")

AUTO_SEMICOLON_TEXT = "\n"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int
    end: int
    line: int
    column: int
    end_line: int

    @property
    def is_auto_semicolon(self) -> bool:
        return self.kind is TokenKind.SEMICOLON and self.text == AUTO_SEMICOLON_TEXT

    @property
    def is_code(self) -> bool:
        return self.kind is not TokenKind.COMMENT and not self.is_auto_semicolon


class _Scanner:
    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.insert_semicolon = False
        self.tokens: list[Token] = []

    def _emit(self, kind: TokenKind, start: int, end: int, *, text: str | None = None) -> Token:
        value = self.source[start:end] if text is None else text
        end_line = self.line + self.source.count("\n", start, end)
        token = Token(
            kind=kind,
            text=value,
            offset=start,
            end=end,
            line=self.line,
            column=start - self.line_start + 1,
            end_line=end_line,
        )
        self.tokens.append(token)
        return token

    def _advance_to(self, end: int) -> None:
        newlines = self.source.count("\n", self.pos, end)
        if newlines:
            self.line += newlines
            self.line_start = self.source.rfind("\n", self.pos, end) + 1
        self.pos = end

    def _auto_semicolon(self, at: int) -> None:
        if self.insert_semicolon:
            self._emit(TokenKind.SEMICOLON, at, at, text=AUTO_SEMICOLON_TEXT)
        self.insert_semicolon = False

    def run(self) -> list[Token]:
        source = self.source
        size = len(source)
        while self.pos < size:
            start = self.pos
            ch = source[start]
            if ch == "\n":
                self._auto_semicolon(start)
                self._advance_to(start + 1)
                continue
            if ch in " \t\r\f\ufeff":
                self.pos += 1
                continue
            if source.startswith("//", start):
                end = source.find("\n", start)
                end = size if end == -1 else end
                self._emit(TokenKind.COMMENT, start, end)
                self.pos = end
                continue
            if source.startswith("/*", start):
                close = source.find("*/", start + 2)
                end = size if close == -1 else close + 2
                # A general comment spanning lines acts like a newline.
                if "\n" in source[start:end]:
                    self._auto_semicolon(start)
                self._emit(TokenKind.COMMENT, start, end)
                self._advance_to(end)
                continue
            ident = _IDENT_RE.match(source, start)
            if ident is not None:
                text = ident.group(0)
                if text in GO_KEYWORDS:
                    self._emit(TokenKind.KEYWORD, start, ident.end())
                    self.insert_semicolon = text in _SEMICOLON_KEYWORDS
                else:
                    self._emit(TokenKind.IDENT, start, ident.end())
                    self.insert_semicolon = True
                self.pos = ident.end()
                continue
            if ch.isdigit() or (ch == "." and source[start + 1 : start + 2].isdigit()):
                end = self._number_end(start)
                self._emit(TokenKind.NUMBER, start, end)
                self.insert_semicolon = True
                self.pos = end
                continue
            if ch == '"' or ch == "'":
                end = self._quoted_end(start, ch)
                self._emit(TokenKind.STRING if ch == '"' else TokenKind.RUNE, start, end)
                self.insert_semicolon = True
                self.pos = end
                continue
            if ch == "`":
                close = source.find("`", start + 1)
                end = size if close == -1 else close + 1
                self._emit(TokenKind.STRING, start, end)
                self.insert_semicolon = True
                self._advance_to(end)
                continue
            if ch == ";":
                self._emit(TokenKind.SEMICOLON, start, start + 1)
                self.insert_semicolon = False
                self.pos = start + 1
                continue
            operator = next((op for op in _OPERATORS if source.startswith(op, start)), None)
            if operator is not None:
                self._emit(TokenKind.OPERATOR, start, start + len(operator))
                self.insert_semicolon = operator in _SEMICOLON_OPERATORS
                self.pos = start + len(operator)
                continue
            self._emit(TokenKind.ILLEGAL, start, start + 1)
            self.pos = start + 1
        self._auto_semicolon(size)
        return self.tokens

    def _number_end(self, start: int) -> int:
        source = self.source
        exponent_marks = "pP" if source.startswith(("0x", "0X"), start) else "eEpP"
        index = start
        while index < len(source):
            ch = source[index]
            if ch.isalnum() or ch in "_.":
                index += 1
                continue
            if ch in "+-" and index > start and source[index - 1] in exponent_marks:
                index += 1
                continue
            break
        return index

    def _quoted_end(self, start: int, quote: str) -> int:
        source = self.source
        index = start + 1
        while index < len(source):
            ch = source[index]
            if ch == "\n":
                return index
            if ch == "\\" and index + 1 < len(source) and source[index + 1] != "\n":
                index += 2
                continue
            index += 1
            if ch == quote:
                return index
        return len(source)


def scan(source: str) -> list[Token]:
    """Tokenize Go source, comments and automatic semicolons included."""
    return _Scanner(source).run()
