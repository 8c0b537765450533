"""設定ファイル（TOML/JSON）を読み込むユーティリティ。

目的:
        参照する列と記述子の列を設定ファイルとして外部化し、辞書（dict）としてロードする。
        設定が無い場合は driver の既定シナリオを使う。

想定するキー:
        sequence = [34, 50, 25, 100, 65]
        descriptors = [{signed = 3}, {unsigned = 4}]
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from .driver import DEFAULT_DESCRIPTORS, DEFAULT_SEQUENCE, FALLBACK
from .lookup import IndexedSequence
from .types import IndexDescriptor, Signed, Unsigned


def load_config(path: Path) -> Dict[str, Any]:
    """設定ファイルを読み込み、Python の辞書として返す。

    Args:
        path: 設定ファイルへのパス。拡張子でフォーマットを判定する。

    Returns:
        設定内容を表す辞書。

    Raises:
        FileNotFoundError: 指定パスが存在しない場合。
        ValueError: 対応していない拡張子の場合。
        json.JSONDecodeError: JSON のパースに失敗した場合。
        tomllib.TOMLDecodeError: TOML のパースに失敗した場合。
    """

    # 設定ファイルが存在しない場合は、早期に失敗させて原因を明確化する。
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix == ".toml":
        # tomllib.load はバイナリファイルオブジェクトを想定する。
        with path.open("rb") as handle:
            return tomllib.load(handle)

    if path.suffix == ".json":
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    raise ValueError(f"Unsupported config format: {path.suffix}")


def descriptor_from_config(entry: Mapping[str, Any]) -> IndexDescriptor:
    """{"signed": n} / {"unsigned": n} から記述子を作る。

    タグはちょうど 1 つでなければならない。
    """

    if not isinstance(entry, Mapping):
        raise ValueError(f"descriptor はテーブル（dict）である必要があります: {entry!r}")
    keys = set(entry)
    if keys == {"signed"}:
        return Signed(entry["signed"])
    if keys == {"unsigned"}:
        return Unsigned(entry["unsigned"])
    raise ValueError(
        "descriptor は 'signed' か 'unsigned' のどちらか 1 つだけを持つ必要があります: "
        f"{dict(entry)!r}"
    )


def scenario_from_config(
    config: Mapping[str, Any],
) -> Tuple[IndexedSequence, Tuple[IndexDescriptor, ...]]:
    """設定辞書から (sequence, descriptors) を組み立てる。

    欠けているキーは既定シナリオの値で補う。
    不在時の代替値は常に FALLBACK（-1）であり、設定では変えられない。
    """

    if not isinstance(config, Mapping):
        raise ValueError(f"設定のトップレベルはテーブル（dict）である必要があります: {config!r}")
    if "fallback" in config:
        raise ValueError(f"fallback は設定できません（常に {FALLBACK}）")

    sequence = config.get("sequence")
    if sequence is None:
        seq = DEFAULT_SEQUENCE
    elif isinstance(sequence, list):
        # 出力は 10 進整数の行なので、要素は整数に限る。
        if any(isinstance(v, bool) or not isinstance(v, int) for v in sequence):
            raise ValueError("sequence の要素は整数である必要があります")
        seq = IndexedSequence(sequence)
    else:
        raise ValueError("sequence は配列である必要があります")

    raw_descriptors = config.get("descriptors")
    if raw_descriptors is None:
        descriptors: Tuple[IndexDescriptor, ...] = DEFAULT_DESCRIPTORS
    elif isinstance(raw_descriptors, list):
        descriptors = tuple(descriptor_from_config(e) for e in raw_descriptors)
    else:
        raise ValueError("descriptors は配列である必要があります")

    return seq, descriptors


def descriptors_to_config(descriptors: Tuple[IndexDescriptor, ...]) -> List[Dict[str, int]]:
    # 結果 JSON に書き出すための逆変換。
    return [
        {"signed": d.index} if isinstance(d, Signed) else {"unsigned": d.index}
        for d in descriptors
    ]
