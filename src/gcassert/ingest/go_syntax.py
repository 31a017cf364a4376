"""Statement-level syntax tree for Go files and its comment map.

The tree is deliberately coarse: declarations, the statements of every brace
block at any depth, case clause headers, grouped declaration specs and the
elements of multi-line composite literals. That is the granularity at which
//gcassert directives are written, and every node knows its first line and
can render itself on a single line.

Comment groups are associated with nodes following the rules of Go's
ast.NewCommentMap, restricted to this node set.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Iterator

from gcassert.ingest.go_scanner import Token, TokenKind, scan

_OPENERS = frozenset({"(", "[", "{"})
_CLOSERS = frozenset({")", "]", "}"})
_CLAUSE_KEYWORDS = frozenset({"case", "default"})
_HEADER_KEYWORDS = frozenset({"for", "if", "switch", "select"})
_GROUPED_DECL_KEYWORDS = frozenset({"var", "const", "type", "import"})


class NodeKind(StrEnum):
    FILE = "file"
    DECL = "decl"
    STMT = "stmt"
    CLAUSE = "clause"
    SPEC = "spec"
    ELEMENT = "element"


class _SplitMode(StrEnum):
    STATEMENTS = "statements"
    ELEMENTS = "elements"


@dataclass(eq=False)
class GoNode:
    kind: NodeKind
    source: GoSourceFile = field(repr=False)
    first: int
    last: int
    parent: GoNode | None = field(default=None, repr=False)
    children: list[GoNode] = field(default_factory=list, repr=False)

    @property
    def path(self) -> Path:
        return self.source.path

    @property
    def is_empty(self) -> bool:
        return self.last < self.first

    @property
    def first_token(self) -> Token:
        return self.source.code_tokens[self.first]

    @property
    def last_token(self) -> Token:
        return self.source.code_tokens[self.last]

    @property
    def line(self) -> int:
        if self.is_empty:
            return 1
        return self.first_token.line

    @property
    def end_line(self) -> int:
        if self.is_empty:
            return 1
        return self.last_token.end_line

    @property
    def offset(self) -> int:
        if self.is_empty:
            return 0
        return self.first_token.offset

    @property
    def end_offset(self) -> int:
        if self.is_empty:
            return len(self.source.text)
        return self.last_token.end

    @property
    def depth(self) -> int:
        depth = 0
        parent = self.parent
        while parent is not None:
            depth += 1
            parent = parent.parent
        return depth

    def walk(self) -> Iterator[GoNode]:
        """Pre-order traversal; source order within each level."""
        stack: list[GoNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def render(self) -> str:
        """Render the node's code on one line, comments dropped."""
        if self.is_empty:
            return ""
        tokens = self.source.code_tokens[self.first : self.last + 1]
        parts: list[str] = []
        previous_end: int | None = None
        for index, token in enumerate(tokens):
            if token.kind is TokenKind.SEMICOLON:
                following = tokens[index + 1] if index + 1 < len(tokens) else None
                if token.is_auto_semicolon and (following is None or following.text == "}"):
                    continue
                parts.append(";")
                previous_end = token.end
                continue
            if previous_end is not None and token.offset > previous_end:
                parts.append(" ")
            parts.append(token.text)
            previous_end = token.end
        return "".join(parts)


@dataclass(frozen=True)
class CommentGroup:
    comments: tuple[Token, ...]
    trailing: bool = False

    @property
    def line(self) -> int:
        return self.comments[0].line

    @property
    def end_line(self) -> int:
        return self.comments[-1].end_line

    @property
    def offset(self) -> int:
        return self.comments[0].offset

    @property
    def end_offset(self) -> int:
        return self.comments[-1].end

    @property
    def text(self) -> str:
        return "\n".join(comment.text for comment in self.comments)


@dataclass(eq=False)
class GoSourceFile:
    path: Path
    text: str
    tokens: list[Token]
    code_tokens: list[Token] = field(default_factory=list)
    root: GoNode | None = None
    comment_groups: list[CommentGroup] = field(default_factory=list)
    comment_map: dict[GoNode, list[CommentGroup]] = field(default_factory=dict)

    def nodes(self) -> Iterator[GoNode]:
        if self.root is None:
            return iter(())
        return self.root.walk()

    def comments_for(self, node: GoNode) -> list[CommentGroup]:
        return self.comment_map.get(node, [])

    def comment_texts_for(self, node: GoNode) -> list[str]:
        return [comment.text for group in self.comments_for(node) for comment in group.comments]


def _matching_close(tokens: list[Token], open_index: int, hi: int) -> int:
    """Index of the bracket closing tokens[open_index], or hi when unbalanced."""
    depth = 0
    for index in range(open_index, hi):
        token = tokens[index]
        if token.kind is not TokenKind.OPERATOR:
            continue
        if token.text in _OPENERS:
            depth += 1
        elif token.text in _CLOSERS:
            depth -= 1
            if depth == 0:
                return index
    return hi


def _split_statements(tokens: list[Token], lo: int, hi: int) -> list[tuple[int, int]]:
    items: list[tuple[int, int]] = []
    start = lo
    depth = 0
    in_clause_header = False
    # Inside a for/if/switch header, semicolons separate clauses, not statements.
    in_control_header = False
    for index in range(lo, hi):
        token = tokens[index]
        if token.kind is TokenKind.OPERATOR and token.text in _OPENERS:
            if depth == 0 and token.text == "{":
                in_control_header = False
            depth += 1
        elif token.kind is TokenKind.OPERATOR and token.text in _CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0 and token.kind is TokenKind.KEYWORD and token.text in _HEADER_KEYWORDS:
            in_control_header = True
        elif depth == 0 and token.kind is TokenKind.SEMICOLON and not in_control_header:
            if index > start:
                items.append((start, index))
            start = index + 1
            in_clause_header = False
        elif depth == 0 and index == start and token.kind is TokenKind.KEYWORD and token.text in _CLAUSE_KEYWORDS:
            in_clause_header = True
        elif depth == 0 and in_clause_header and token.kind is TokenKind.OPERATOR and token.text == ":":
            items.append((start, index + 1))
            start = index + 1
            in_clause_header = False
    if start < hi:
        items.append((start, hi))
    return items


def _split_elements(tokens: list[Token], lo: int, hi: int) -> list[tuple[int, int]]:
    items: list[tuple[int, int]] = []
    start = lo
    depth = 0
    for index in range(lo, hi):
        token = tokens[index]
        if token.kind is TokenKind.OPERATOR and token.text in _OPENERS:
            depth += 1
        elif token.kind is TokenKind.OPERATOR and token.text in _CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0 and (token.kind is TokenKind.SEMICOLON or token.text == ","):
            if index > start:
                items.append((start, index))
            start = index + 1
    if start < hi:
        items.append((start, hi))
    return items


def _brace_region_mode(tokens: list[Token], open_index: int, lo: int, hi: int) -> _SplitMode:
    depth = 0
    for index in range(lo, hi):
        token = tokens[index]
        if token.kind is TokenKind.OPERATOR and token.text in _OPENERS:
            depth += 1
        elif token.kind is TokenKind.OPERATOR and token.text in _CLOSERS:
            depth = max(0, depth - 1)
        elif depth == 0 and token.kind is TokenKind.SEMICOLON:
            return _SplitMode.STATEMENTS
        elif depth == 0 and token.kind is TokenKind.KEYWORD and token.text in _CLAUSE_KEYWORDS:
            return _SplitMode.STATEMENTS
    if lo >= hi or tokens[hi - 1].end_line == tokens[open_index].line:
        return _SplitMode.STATEMENTS
    # Multi-line composite literal: one node per element.
    return _SplitMode.ELEMENTS


def _add_items(
    source: GoSourceFile,
    parent: GoNode,
    lo: int,
    hi: int,
    *,
    mode: _SplitMode,
    kind: NodeKind,
) -> None:
    tokens = source.code_tokens
    if mode is _SplitMode.ELEMENTS:
        ranges = _split_elements(tokens, lo, hi)
    else:
        ranges = _split_statements(tokens, lo, hi)
    for start, stop in ranges:
        item_kind = kind
        if (
            mode is _SplitMode.STATEMENTS
            and tokens[start].kind is TokenKind.KEYWORD
            and tokens[start].text in _CLAUSE_KEYWORDS
        ):
            item_kind = NodeKind.CLAUSE
        node = GoNode(kind=item_kind, source=source, first=start, last=stop - 1, parent=parent)
        parent.children.append(node)
        _add_nested(source, node)


def _add_nested(source: GoSourceFile, node: GoNode) -> None:
    tokens = source.code_tokens
    index = node.first
    hi = node.last + 1
    if (
        tokens[index].kind is TokenKind.KEYWORD
        and tokens[index].text in _GROUPED_DECL_KEYWORDS
        and index + 1 < hi
        and tokens[index + 1].text == "("
    ):
        close = _matching_close(tokens, index + 1, hi)
        _add_items(source, node, index + 2, close, mode=_SplitMode.STATEMENTS, kind=NodeKind.SPEC)
        index = close + 1
    while index < hi:
        token = tokens[index]
        if token.kind is TokenKind.OPERATOR and token.text == "{":
            close = _matching_close(tokens, index, hi)
            mode = _brace_region_mode(tokens, index, index + 1, close)
            kind = NodeKind.STMT if mode is _SplitMode.STATEMENTS else NodeKind.ELEMENT
            _add_items(source, node, index + 1, close, mode=mode, kind=kind)
            index = close + 1
            continue
        index += 1


def group_comments(tokens: list[Token]) -> list[CommentGroup]:
    """Group comments the way the Go parser does.

    A trailing group holds the comments on the line of the preceding code
    token; any other group holds comments separated by at most one newline.
    """
    groups: list[CommentGroup] = []
    current: list[Token] = []
    trailing = False
    last_code: Token | None = None
    for token in tokens:
        if token.kind is TokenKind.COMMENT:
            if current:
                limit = current[-1].end_line + (0 if trailing else 1)
                if token.line <= limit:
                    current.append(token)
                    continue
                groups.append(CommentGroup(tuple(current), trailing))
                current = [token]
                trailing = False
                continue
            current = [token]
            trailing = last_code is not None and last_code.end_line == token.line
            continue
        if token.is_auto_semicolon:
            continue
        if current:
            groups.append(CommentGroup(tuple(current), trailing))
            current = []
            trailing = False
        last_code = token
    if current:
        groups.append(CommentGroup(tuple(current), trailing))
    return groups


def _innermost_enclosing(root: GoNode, group: CommentGroup) -> GoNode | None:
    enclosing: GoNode | None = None
    candidates = root.children
    while True:
        found = next(
            (
                node
                for node in candidates
                if node.offset < group.offset and node.end_offset > group.end_offset
            ),
            None,
        )
        if found is None:
            return enclosing
        enclosing = found
        candidates = found.children


def _fragment_after(enclosing: GoNode, group: CommentGroup, code_offsets: list[int]) -> GoNode | None:
    """Node for the operand that follows a comment inside a multi-line statement.

    It runs from the first code token after the group to the next comma,
    semicolon or unmatched closing bracket, and is added to the enclosing
    node's children. Returns None when no code follows before such a stop.
    """
    tokens = enclosing.source.code_tokens
    first = bisect_left(code_offsets, group.end_offset)
    depth = 0
    index = first
    while index <= enclosing.last:
        token = tokens[index]
        if token.kind is TokenKind.OPERATOR and token.text in _OPENERS:
            depth += 1
        elif token.kind is TokenKind.OPERATOR and token.text in _CLOSERS:
            if depth == 0:
                break
            depth -= 1
        elif depth == 0 and (token.kind is TokenKind.SEMICOLON or token.text == ","):
            break
        index += 1
    if index == first:
        return None
    fragment = GoNode(kind=NodeKind.ELEMENT, source=enclosing.source, first=first, last=index - 1, parent=enclosing)
    enclosing.children.append(fragment)
    return fragment


def build_comment_map(root: GoNode, groups: list[CommentGroup]) -> dict[GoNode, list[CommentGroup]]:
    """Associate each comment group with one node.

    In order of preference: the last node ending on the group's first line,
    the enclosing node for a trailing group on that node's first line, the
    node ending on the line before the group when a blank line follows
    the group, the next node starting after the group within the same
    enclosing node, and finally the enclosing node itself. A lead group
    inside a multi-line statement with no node after it resolves to the
    operand that follows it, which is where the compiler reports.
    """
    nodes = [node for node in root.walk() if node is not root]
    starts = [node.offset for node in nodes]
    by_end = sorted(nodes, key=lambda node: (node.end_offset, -node.depth))
    ends = [node.end_offset for node in by_end]
    code_offsets = [token.offset for token in root.source.code_tokens]
    comment_map: dict[GoNode, list[CommentGroup]] = {}
    for group in groups:
        enclosing = _innermost_enclosing(root, group)
        next_index = bisect_left(starts, group.end_offset)
        following = nodes[next_index] if next_index < len(nodes) else None
        if following is not None and enclosing is not None and following.end_offset > enclosing.end_offset:
            following = None
        prev_index = bisect_right(ends, group.offset) - 1
        previous = by_end[prev_index] if prev_index >= 0 else None
        target: GoNode | None
        if previous is not None and previous.end_line == group.line:
            target = previous
        elif group.trailing and enclosing is not None and enclosing.line == group.line:
            # Trailing comment after an opening brace stays on the header line.
            target = enclosing
        elif (
            previous is not None
            and previous.end_line == group.line - 1
            and (following is None or following.line > group.end_line + 1)
        ):
            target = previous
        elif following is not None:
            target = following
        elif enclosing is not None:
            target = enclosing
            if not group.trailing:
                target = _fragment_after(enclosing, group, code_offsets) or enclosing
        else:
            target = previous
        if target is None:
            continue
        comment_map.setdefault(target, []).append(group)
    return comment_map


def parse_go_source(text: str, path: Path) -> GoSourceFile:
    tokens = scan(text)
    source = GoSourceFile(path=path, text=text, tokens=tokens)
    source.code_tokens = [token for token in tokens if token.kind is not TokenKind.COMMENT]
    root = GoNode(kind=NodeKind.FILE, source=source, first=0, last=len(source.code_tokens) - 1)
    _add_items(source, root, 0, len(source.code_tokens), mode=_SplitMode.STATEMENTS, kind=NodeKind.DECL)
    source.root = root
    source.comment_groups = group_comments(tokens)
    source.comment_map = build_comment_map(root, source.comment_groups)
    return source
