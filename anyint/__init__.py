"""anyint パッケージ。

列を符号付き / 符号なしのどちらの整数でも参照できる lookup を提供する。
利用者は基本的に `from anyint import lookup, Signed, Unsigned` の形で import できる。
"""

from .driver import FALLBACK, run_lookups
from .lookup import GetWithAnyInt, IndexedSequence, IndexOutOfRangeError, lookup
from .types import IndexDescriptor, Signed, Unsigned

__all__ = [
    "FALLBACK",
    "GetWithAnyInt",
    "IndexDescriptor",
    "IndexOutOfRangeError",
    "IndexedSequence",
    "Signed",
    "Unsigned",
    "lookup",
    "run_lookups",
]
