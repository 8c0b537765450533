"""記述子の列を順に lookup し、表示用の値へ解決するドライバ。

処理の流れ（記述子 1 つごと）:
    1. r = lookup(sequence, d)
    2. r が None なら FALLBACK（-1）に置き換える
    3. 記述子の順序どおりに 1 行ずつ出力する

範囲外の Unsigned に当たった時点で IndexOutOfRangeError がそのまま伝播する。
それより前の記述子の行は出力済みになる。
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Sequence

import pandas as pd

from .lookup import IndexedSequence, lookup
from .types import IndexDescriptor, LookupResult, Signed, Unsigned

# 不在（None）のときに使う固定の代替値。設定では変えられない。
FALLBACK = -1

DEFAULT_SEQUENCE = IndexedSequence((34, 50, 25, 100, 65))

DEFAULT_DESCRIPTORS = (
    Signed(3),
    Unsigned(4),
    Signed(-2),
    Unsigned(2),
)

TABLE_COLUMNS = ["kind", "index", "found", "value"]


def resolve(result: LookupResult[Any]) -> Any:
    """lookup の結果を表示用の値にする。None なら FALLBACK を返す。"""

    return FALLBACK if result is None else result


def iter_lookups(
    sequence: Sequence[Any],
    descriptors: Iterable[IndexDescriptor],
) -> Iterator[Dict[str, Any]]:
    """記述子を 1 つずつ解決し、行（dict）を順に返す。

    行のキー:
        - kind: "signed" / "unsigned"
        - index: 記述子の値
        - found: lookup が値を返したか
        - value: 解決後の値（不在なら FALLBACK）

    範囲外の Unsigned に到達した時点で IndexOutOfRangeError が送出される。
    それまでに返した行は呼び出し側で処理済みにできる。
    """

    for d in descriptors:
        result = lookup(sequence, d)
        yield {
            "kind": "signed" if isinstance(d, Signed) else "unsigned",
            "index": d.index,
            "found": result is not None,
            "value": resolve(result),
        }


def run_lookups(
    sequence: Sequence[Any],
    descriptors: Iterable[IndexDescriptor],
) -> List[Any]:
    """各記述子を順に解決し、値のリストを返す。

    Raises:
        IndexOutOfRangeError: Unsigned の位置が範囲外の場合（捕捉しない）。
    """

    return [row["value"] for row in iter_lookups(sequence, descriptors)]


def format_line(value: Any) -> str:
    # numpy のスカラも int に寄せて 10 進表記にする。
    return str(int(value)) if _is_integral(value) else str(value)


def format_lines(values: Iterable[Any]) -> List[str]:
    return [format_line(v) for v in values]


def _is_integral(value: Any) -> bool:
    try:
        return int(value) == value and not isinstance(value, bool)
    except (TypeError, ValueError):
        return False


def rows_to_table(rows: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """iter_lookups の行を DataFrame にまとめる（レポート用）。"""

    return pd.DataFrame(list(rows), columns=TABLE_COLUMNS)


def lookup_table(
    sequence: Sequence[Any],
    descriptors: Iterable[IndexDescriptor],
) -> pd.DataFrame:
    return rows_to_table(iter_lookups(sequence, descriptors))
