"""任意の整数種別（Signed / Unsigned）で列を参照する lookup 本体。

方針:
    - Unsigned(i) は sequence[i] を返す。範囲外は致命的エラー（IndexOutOfRangeError）。
    - Signed(i) は値に関わらず常に None を返す。非負で有効な位置に見えても解決しない。
    - 純粋関数であり、列を変更しない。
"""

from __future__ import annotations

from typing import Sequence

from .types import IndexDescriptor, LookupResult, Signed, T, Unsigned


class IndexOutOfRangeError(IndexError):
    """Unsigned の位置が列の長さ以上だった場合の例外。

    呼び出し側（driver / CLI）では捕捉しない。プロセスはそのまま異常終了する。
    """

    def __init__(self, index: int, length: int) -> None:
        super().__init__(
            f"index out of range: the len is {length} but the index is {index}"
        )
        self.index = index
        self.length = length


def lookup(sequence: Sequence[T], descriptor: IndexDescriptor) -> LookupResult[T]:
    """記述子に従って列の要素を取り出す。

    Args:
        sequence: 参照する列（tuple / list / numpy.ndarray など）。
        descriptor: Signed または Unsigned。

    Returns:
        Unsigned なら該当要素、Signed なら常に None。

    Raises:
        IndexOutOfRangeError: Unsigned の位置が len(sequence) 以上の場合。
        TypeError: 記述子が Signed / Unsigned のどちらでもない場合。
    """

    if isinstance(descriptor, Signed):
        return None
    if isinstance(descriptor, Unsigned):
        position = descriptor.index
        length = len(sequence)
        # Unsigned は構築時に非負が保証されているので、上限だけ確認すれば足りる。
        if position >= length:
            raise IndexOutOfRangeError(position, length)
        return sequence[position]
    raise TypeError(f"未知の記述子です: {descriptor!r}")


class GetWithAnyInt:
    """列クラスに get_with_any_int を生やす mixin。"""

    __slots__ = ()

    def get_with_any_int(self, descriptor: IndexDescriptor):
        return lookup(self, descriptor)


class IndexedSequence(GetWithAnyInt, tuple):
    """get_with_any_int を持つ不変の列。"""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"IndexedSequence({tuple.__repr__(self)})"
