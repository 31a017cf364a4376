from gcassert.ingest.adapter_contract import (
    CommentedTree,
    LanguageAdapter,
    LoadedPackages,
    ParsedFileUnit,
    SyntaxNode,
)
from gcassert.ingest.go_adapter import GoAdapter, go_build_target
from gcassert.ingest.go_syntax import GoNode, GoSourceFile, parse_go_source


def resolve_adapter(*, language_id=None, default_language_id="go"):
    from gcassert.ingest.registry import resolve_adapter as _resolve_adapter

    return _resolve_adapter(language_id=language_id, default_language_id=default_language_id)


__all__ = [
    "CommentedTree",
    "GoAdapter",
    "GoNode",
    "GoSourceFile",
    "LanguageAdapter",
    "LoadedPackages",
    "ParsedFileUnit",
    "SyntaxNode",
    "go_build_target",
    "parse_go_source",
    "resolve_adapter",
]
