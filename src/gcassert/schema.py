from __future__ import annotations

import os
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COMPILER_COMMAND = ("go",)
DEFAULT_GCFLAGS = "all=-m -m -d=ssa/check_bce/debug=1"


class CompilerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    command: List[str] = Field(default_factory=lambda: list(DEFAULT_COMPILER_COMMAND), min_length=1)
    gcflags: str = DEFAULT_GCFLAGS
    build_flags: List[str] = []
    env: Dict[str, str] = {}

    def environment(self) -> dict[str, str] | None:
        """Child environment, or None to inherit ours unchanged."""
        if not self.env:
            return None
        merged = dict(os.environ)
        merged.update(self.env)
        return merged
