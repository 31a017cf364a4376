from __future__ import annotations

from pathlib import Path

from gcassert.ingest.go_syntax import GoNode, NodeKind, group_comments, parse_go_source
from gcassert.ingest.go_scanner import scan
from tests.go_helpers import go_source, line_of


def _parse(text: str):
    return parse_go_source(go_source(text), Path("/src/p/p.go"))


def _node_starting_with(source, prefix: str) -> GoNode:
    return next(node for node in source.nodes() if node.kind is not NodeKind.FILE and node.render().startswith(prefix))


def _attached(source, prefix: str) -> list[str]:
    return source.comment_texts_for(_node_starting_with(source, prefix))


FUNC_SOURCE = """
package p

// add returns a plus b.
func add(a, b int) int {
    return a + b
}

func sum(a []int) (total int) {
    for i := range a {
        //gcassert:bce
        total += a[i]
    }
    x := add(1, 2) //gcassert:inline
    return total + x
}
"""


def test_tree_holds_declarations_and_nested_statements() -> None:
    source = _parse(FUNC_SOURCE)
    root = source.root
    assert root is not None
    assert [child.kind for child in root.children] == [NodeKind.DECL, NodeKind.DECL, NodeKind.DECL]
    assert [child.render() for child in root.children] == [
        "package p",
        "func add(a, b int) int { return a + b }",
        "func sum(a []int) (total int) { for i := range a { total += a[i] }; x := add(1, 2); return total + x }",
    ]
    loop = _node_starting_with(source, "for i")
    assert [child.render() for child in loop.children] == ["total += a[i]"]
    assert loop.children[0].parent is loop
    assert loop.line == line_of(FUNC_SOURCE, "for i := range a")


def test_walk_is_preorder_in_source_order() -> None:
    source = _parse(FUNC_SOURCE)
    lines = [node.line for node in source.nodes()]
    assert lines == sorted(lines)
    assert next(source.nodes()).kind is NodeKind.FILE


def test_lead_comment_attaches_to_following_statement() -> None:
    source = _parse(FUNC_SOURCE)
    assert _attached(source, "total += a[i]") == ["//gcassert:bce"]
    assert _attached(source, "func add") == ["// add returns a plus b."]


def test_trailing_comment_attaches_to_statement_on_its_line() -> None:
    source = _parse(FUNC_SOURCE)
    assert _attached(source, "x := add(1, 2)") == ["//gcassert:inline"]
    assert _attached(source, "return total + x") == []


def test_trailing_comment_after_open_brace_stays_on_header_line() -> None:
    source = _parse(
        """
        package p

        func f(a []int) (s int) {
            for i := range a { //gcassert:bce
                s += a[i]
            }
            return s
        }
        """
    )
    assert _attached(source, "for i := range a") == ["//gcassert:bce"]
    assert _attached(source, "s += a[i]") == []


def test_comment_followed_by_blank_line_attaches_to_previous_node() -> None:
    source = _parse(
        """
        package p

        func f() {
            x := 1
            // about x

            y := 2
            _ = x + y
        }
        """
    )
    assert _attached(source, "x := 1") == ["// about x"]
    assert _attached(source, "y := 2") == []


def test_comment_group_spans_adjacent_lines() -> None:
    source = _parse(
        """
        package p

        func f(a []int, i int) int {
            // leading words
            //gcassert:inline
            //gcassert:bce
            return a[g(i)]
        }
        """
    )
    assert _attached(source, "return a[g(i)]") == [
        "// leading words",
        "//gcassert:inline",
        "//gcassert:bce",
    ]


def test_case_clause_headers_are_separate_nodes() -> None:
    text = """
        package p

        func g(x int) int {
            switch x {
            case 1, 2:
                //gcassert:inline
                return add(x, 1)
            default:
                return 0
            }
        }
        """
    source = _parse(text)
    switch = _node_starting_with(source, "switch x")
    assert [(child.kind, child.render()) for child in switch.children] == [
        (NodeKind.CLAUSE, "case 1, 2:"),
        (NodeKind.STMT, "return add(x, 1)"),
        (NodeKind.CLAUSE, "default:"),
        (NodeKind.STMT, "return 0"),
    ]
    target = _node_starting_with(source, "return add")
    assert source.comment_texts_for(target) == ["//gcassert:inline"]
    assert target.line == line_of(text, "return add(x, 1)")


def test_grouped_declarations_and_composite_literal_elements() -> None:
    source = _parse(
        """
        package p

        var (
            a = 1
            b = 2
        )

        var table = []int{
            1,
            //gcassert:bce
            xs[0],
        }
        """
    )
    grouped = _node_starting_with(source, "var (")
    assert [(child.kind, child.render()) for child in grouped.children] == [
        (NodeKind.SPEC, "a = 1"),
        (NodeKind.SPEC, "b = 2"),
    ]
    table = _node_starting_with(source, "var table")
    assert [(child.kind, child.render()) for child in table.children] == [
        (NodeKind.ELEMENT, "1"),
        (NodeKind.ELEMENT, "xs[0]"),
    ]
    assert _attached(source, "xs[0]") == ["//gcassert:bce"]


def test_function_literal_bodies_are_parsed() -> None:
    source = _parse(
        """
        package p

        func run(a []int) {
            sort.Slice(a, func(i, j int) bool {
                //gcassert:bce
                return a[i] < a[j]
            })
        }
        """
    )
    call = _node_starting_with(source, "sort.Slice")
    assert [child.render() for child in call.children] == ["return a[i] < a[j]"]
    assert _attached(source, "return a[i] < a[j]") == ["//gcassert:bce"]


def test_render_drops_comments_and_collapses_whitespace() -> None:
    source = _parse(
        """
        package p

        func f() {
            x :=   g( /* inline note */ 1,
                2)
            _ = x
        }
        """
    )
    assert _node_starting_with(source, "x :=").render() == "x := g( 1, 2)"


def test_group_comments_separates_trailing_and_lead_groups() -> None:
    tokens = scan("x := 1 // trailing\n// lead one\n// lead two\n\n// detached\ny := 2\n")
    groups = group_comments(tokens)
    assert [(group.trailing, group.text) for group in groups] == [
        (True, "// trailing"),
        (False, "// lead one\n// lead two"),
        (False, "// detached"),
    ]


def test_empty_file_parses() -> None:
    source = parse_go_source("", Path("/src/p/empty.go"))
    assert source.root is not None
    assert source.root.is_empty
    assert list(source.nodes()) == [source.root]
    assert source.comment_map == {}


CONTROL_SOURCE = """
package p

func f(s []int) int {
    total := 0
    //gcassert:bce
    for i := 0; i < len(s); i++ {
        total += s[i]
    }
    //gcassert:bce
    if v := s[3]; v > 0 {
        total += v
    } else if w := s[5]; w > 1 {
        total -= w
    }
    //gcassert:bce
    switch x := s[4]; x {
    case 1:
        total++
    }
    return total
}
"""


def test_control_headers_keep_their_clauses_together() -> None:
    source = _parse(CONTROL_SOURCE)
    body = _node_starting_with(source, "func f").children
    assert [child.render() for child in body] == [
        "total := 0",
        "for i := 0; i < len(s); i++ { total += s[i] }",
        "if v := s[3]; v > 0 { total += v } else if w := s[5]; w > 1 { total -= w }",
        "switch x := s[4]; x { case 1: total++ }",
        "return total",
    ]
    assert [child.line for child in body[1:4]] == [
        line_of(CONTROL_SOURCE, "for i := 0"),
        line_of(CONTROL_SOURCE, "if v := s[3]"),
        line_of(CONTROL_SOURCE, "switch x := s[4]"),
    ]
    branch = _node_starting_with(source, "if v := s[3]")
    assert [child.render() for child in branch.children] == ["total += v", "total -= w"]


def test_directives_above_control_headers_attach_to_whole_statement() -> None:
    source = _parse(CONTROL_SOURCE)
    for prefix in ("for i := 0", "if v := s[3]", "switch x := s[4]"):
        assert _attached(source, prefix) == ["//gcassert:bce"]


ARGUMENT_SOURCE = """
package p

func f(s []int, i int) int {
    x := add(
        //gcassert:bce
        s[i],
        //gcassert:inline
        g(i, 1),
    )
    y := s[0] +
        //gcassert:bce
        s[i+1]
    return x + y
}
"""


def test_comment_inside_multiline_statement_attaches_to_following_operand() -> None:
    source = _parse(ARGUMENT_SOURCE)
    call = _node_starting_with(source, "x := add(")
    assert [(child.kind, child.render(), child.line) for child in call.children] == [
        (NodeKind.ELEMENT, "s[i]", line_of(ARGUMENT_SOURCE, "s[i],")),
        (NodeKind.ELEMENT, "g(i, 1)", line_of(ARGUMENT_SOURCE, "g(i, 1),")),
    ]
    assert source.comment_texts_for(call.children[0]) == ["//gcassert:bce"]
    assert source.comment_texts_for(call.children[1]) == ["//gcassert:inline"]
    assert source.comment_texts_for(call) == []

    operand = _node_starting_with(source, "s[i+1]")
    assert operand.line == line_of(ARGUMENT_SOURCE, "s[i+1]")
    assert operand.parent is _node_starting_with(source, "y := s[0] +")
    assert source.comment_texts_for(operand) == ["//gcassert:bce"]
