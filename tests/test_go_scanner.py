from __future__ import annotations

from gcassert.ingest.go_scanner import TokenKind, scan


def _kinds_and_texts(source: str) -> list[tuple[TokenKind, str]]:
    return [(token.kind, token.text) for token in scan(source)]


def test_scan_inserts_semicolon_after_line_ending_operand() -> None:
    assert _kinds_and_texts("x := a[i] // c\n") == [
        (TokenKind.IDENT, "x"),
        (TokenKind.OPERATOR, ":="),
        (TokenKind.IDENT, "a"),
        (TokenKind.OPERATOR, "["),
        (TokenKind.IDENT, "i"),
        (TokenKind.OPERATOR, "]"),
        (TokenKind.COMMENT, "// c"),
        (TokenKind.SEMICOLON, "\n"),
    ]


def test_scan_semicolon_insertion_rules() -> None:
    tokens = scan("return\nx++\nfoo(\na,\n)\nbreak\ngo f()\n")
    auto = [token.line for token in tokens if token.is_auto_semicolon]
    # return, x++, ), break and f() end their lines; foo( and a, do not.
    assert auto == [1, 2, 5, 6, 7]


def test_scan_keywords_and_identifiers() -> None:
    tokens = scan("func caseX() { switch {} }")
    assert tokens[0].kind is TokenKind.KEYWORD
    assert tokens[1].kind is TokenKind.IDENT
    assert tokens[1].text == "caseX"
    assert [token.text for token in tokens if token.kind is TokenKind.KEYWORD] == ["func", "switch"]


def test_scan_literals() -> None:
    tokens = scan("s := \"a\\\"b\" + `raw\nstring` + 'x' + '\\''\nn := 0x1p-2 + 1e+5 + 0xE+1\n")
    strings = [token.text for token in tokens if token.kind is TokenKind.STRING]
    assert strings == ['"a\\"b"', "`raw\nstring`"]
    runes = [token.text for token in tokens if token.kind is TokenKind.RUNE]
    assert runes == ["'x'", "'\\''"]
    numbers = [token.text for token in tokens if token.kind is TokenKind.NUMBER]
    assert numbers == ["0x1p-2", "1e+5", "0xE", "1"]


def test_scan_tracks_lines_across_multiline_tokens() -> None:
    tokens = scan("a := `x\ny`\nb := 1 /* one\ntwo */ c\n")
    raw = next(token for token in tokens if token.text.startswith("`"))
    assert (raw.line, raw.end_line) == (1, 2)
    b = next(token for token in tokens if token.text == "b")
    assert (b.line, b.column) == (3, 1)
    comment = next(token for token in tokens if token.kind is TokenKind.COMMENT)
    assert (comment.line, comment.end_line) == (3, 4)
    c = next(token for token in tokens if token.text == "c")
    assert c.line == 4


def test_scan_multiline_general_comment_acts_as_newline() -> None:
    tokens = scan("x := 1 /* a\nb */ y := 2")
    texts = [token.text for token in tokens if token.kind is not TokenKind.COMMENT]
    assert texts == ["x", ":=", "1", "\n", "y", ":=", "2", "\n"]


def test_scan_is_tolerant_of_malformed_input() -> None:
    tokens = scan('x := "unterminated\ny := @\n')
    assert any(token.kind is TokenKind.ILLEGAL and token.text == "@" for token in tokens)
    unterminated = next(token for token in tokens if token.kind is TokenKind.STRING)
    assert unterminated.text == '"unterminated'
    assert next(token for token in tokens if token.text == "y").line == 2


def test_scan_longest_operator_match() -> None:
    texts = [token.text for token in scan("a &^= b <<= c ... d <- e")]
    assert "&^=" in texts
    assert "<<=" in texts
    assert "..." in texts
    assert "<-" in texts
