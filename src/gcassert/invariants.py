"""Invariant markers."""

from __future__ import annotations

from typing import NoReturn

from gcassert.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as unreachable.

    The keyword payload is attached to the raised exception for debugging; it
    is not otherwise evaluated.
    """
    raise NeverThrown(str(reason or "never() invariant reached").strip(), env=env)
