from __future__ import annotations

from pathlib import Path
from typing import Iterable

from gcassert.analysis.directive_index import DirectiveIndex
from gcassert.directives import match_directive
from gcassert.ingest.adapter_contract import CommentedTree, ParsedFileUnit


class DirectiveVisitor:
    """Records the directives of one parsed file into an index.

    Every comment is matched on its own, so an unrelated or unknown tag never
    hides a valid directive later in the same comment group. Directives land
    on the line where the annotated node starts.
    """

    def __init__(self, tree: CommentedTree, index: DirectiveIndex) -> None:
        self.tree = tree
        self.index = index
        self.recorded = 0

    def visit(self) -> int:
        for node in self.tree.nodes():
            for text in self.tree.comment_texts_for(node):
                kind = match_directive(text)
                if kind is None:
                    continue
                self.index.record_directive(node, kind)
                self.recorded += 1
        return self.recorded


def extract_directives(unit: ParsedFileUnit, index: DirectiveIndex) -> int:
    return DirectiveVisitor(unit.tree, index).visit()


def collect_directives(units: Iterable[ParsedFileUnit], *, cwd: Path) -> DirectiveIndex:
    index = DirectiveIndex(cwd=cwd)
    for unit in units:
        extract_directives(unit, index)
    return index
