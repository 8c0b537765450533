"""インデックス記述子（IndexDescriptor）の型定義。

IndexDescriptor は「符号付き」か「符号なし」のどちらか一方のタグだけを持つ和型である。
両方のフィールドを持つ構造体ではなく、Signed / Unsigned の 2 つの dataclass の Union として表す。
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Optional, TypeVar, Union

import numpy as np

T = TypeVar("T")

# 32bit 符号付き整数の範囲。
_I32 = np.iinfo(np.int32)
# 「任意の位置を表せる」符号なし整数の上限。ポインタ幅（intp）に合わせる。
_SIZE_MAX = int(np.iinfo(np.intp).max)


def _as_int(value: object, tag: str) -> int:
    # bool は int のサブクラスだが、インデックスとしては受け付けない。
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"{tag} の index に bool は使えません: {value!r}")
    try:
        return operator.index(value)
    except TypeError as exc:
        raise TypeError(
            f"{tag} の index は整数である必要があります: {value!r}"
        ) from exc


@dataclass(frozen=True)
class Signed:
    """符号付き（32bit）インデックス。負の値も取り得る。"""

    index: int

    def __post_init__(self) -> None:
        value = _as_int(self.index, "Signed")
        if not (int(_I32.min) <= value <= int(_I32.max)):
            raise ValueError(f"Signed の index が 32bit の範囲外です: {value}")
        object.__setattr__(self, "index", value)


@dataclass(frozen=True)
class Unsigned:
    """符号なしインデックス。0 以上で、列中の任意の位置を表せる。"""

    index: int

    def __post_init__(self) -> None:
        value = _as_int(self.index, "Unsigned")
        if value < 0:
            raise ValueError(f"Unsigned の index は 0 以上である必要があります: {value}")
        if value > _SIZE_MAX:
            raise ValueError(f"Unsigned の index が大きすぎます: {value}")
        object.__setattr__(self, "index", value)


# IndexDescriptor:
# - 和型。isinstance で分岐する（Rust の match に相当）。
IndexDescriptor = Union[Signed, Unsigned]

# LookupResult:
# - 要素が得られれば T、得られなければ None（不在）。
LookupResult = Optional[T]
