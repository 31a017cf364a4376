"""Directive kinds recognized in //gcassert comments."""

from __future__ import annotations

from enum import StrEnum
import re

from gcassert.exceptions import UnknownDirectiveError

DIRECTIVE_PREFIX = "//gcassert:"
DIRECTIVE_TAG_RE = re.compile(re.escape(DIRECTIVE_PREFIX) + r"(\w+)")


class DirectiveKind(StrEnum):
    INLINE = "inline"
    BCE = "bce"


_KIND_BY_TAG: dict[str, DirectiveKind] = {kind.value: kind for kind in DirectiveKind}


def parse_directive_kind(tag: str) -> DirectiveKind:
    try:
        return _KIND_BY_TAG[tag]
    except KeyError:
        raise UnknownDirectiveError(tag) from None


def match_directive(comment_text: str) -> DirectiveKind | None:
    """Return the kind named by the first tag in a comment.

    Comments without a tag and tags naming no known kind both yield None, so
    markers used by other tools never break a run.
    """
    match = DIRECTIVE_TAG_RE.search(comment_text)
    if match is None:
        return None
    try:
        return parse_directive_kind(match.group(1))
    except UnknownDirectiveError:
        return None
