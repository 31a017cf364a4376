"""gcassert package root."""

from gcassert.exceptions import GCAssertError, NeverThrown
from gcassert.invariants import never
from gcassert.runner import RunResult, gcassert, list_directives

__all__ = [
    "__version__",
    "GCAssertError",
    "NeverThrown",
    "RunResult",
    "gcassert",
    "list_directives",
    "never",
]

__version__ = "0.1.0"
