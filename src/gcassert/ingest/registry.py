from __future__ import annotations

from gcassert.invariants import never
from gcassert.ingest.adapter_contract import LanguageAdapter
from gcassert.ingest.go_adapter import GoAdapter


_ADAPTERS_BY_LANGUAGE: dict[str, LanguageAdapter] = {}


def register_adapter(adapter: LanguageAdapter) -> None:
    _ADAPTERS_BY_LANGUAGE[adapter.language_id] = adapter


def adapter_for_language(language_id: str) -> LanguageAdapter | None:
    return _ADAPTERS_BY_LANGUAGE.get(language_id.lower())


def resolve_adapter(*, language_id: str | None = None, default_language_id: str = "go") -> LanguageAdapter:
    adapter = adapter_for_language(language_id or default_language_id)
    if adapter is None:
        never("unknown language adapter", language_id=language_id or default_language_id)
    return adapter


register_adapter(GoAdapter())
