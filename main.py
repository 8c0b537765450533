"""CLI エントリポイント。

目的:
    列と記述子の列を順に lookup し、解決した値を 1 行ずつ標準出力に表示する。
    引数なしで実行すると既定シナリオ（-1, 65, -1, 25）を表示する。

標準出力には結果の行だけを書く。補助的なメッセージは標準エラーに出す。

想定される例外:
    - 範囲外の Unsigned: IndexOutOfRangeError（それまでの行を表示した後、捕捉せず異常終了する）
    - 設定ファイルが存在しない: FileNotFoundError
    - JSON/TOML の構文エラー: パーサ由来の例外
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from anyint.config import descriptors_to_config, load_config, scenario_from_config
from anyint.driver import FALLBACK, format_line, format_lines, iter_lookups, rows_to_table
from anyint.logger import WandBLogger, wandb_available


def main(argv: Optional[Sequence[str]] = None) -> None:
    """コマンドライン引数を解釈し、lookup を実行して結果を表示する。

    Args:
        argv: 引数リスト。None の場合は `sys.argv` を argparse が参照する。
    """

    parser = argparse.ArgumentParser(description="anyint lookup runner")

    # --config 引数:
    # - 列と記述子を設定ファイルから読む
    # - 指定がない場合は既定シナリオを使う
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML or JSON config file (optional).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write result JSON (optional).",
    )
    parser.add_argument(
        "--table",
        type=Path,
        default=None,
        help="Path to write the per-descriptor lookup table as CSV (optional).",
    )

    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config is not None else {}
    sequence, descriptors = scenario_from_config(config)

    # WandB ログの準備（任意）。
    wandb_logger = None
    wandb_project = os.getenv("WANDB_PROJECT")
    wandb_enabled = os.getenv("WANDB_ENABLED", "").lower() in {"1", "true", "yes"}
    if wandb_project or wandb_enabled:
        if not wandb_project:
            wandb_project = "anyint"
        if wandb_available():
            wandb_logger = WandBLogger(project=wandb_project, name="anyint-run")
            wandb_logger.start_run(config={"config": config})
        else:
            print("WandB が利用できないためロギングをスキップします。", file=sys.stderr)

    # 記述子ごとに解決してすぐ 1 行を表示する。
    # 範囲外の Unsigned に当たるとここで例外が伝播し、それ以前の行だけが表示済みになる。
    rows = []
    for row in iter_lookups(sequence, descriptors):
        print(format_line(row["value"]), flush=True)
        rows.append(row)
    values = [row["value"] for row in rows]
    lines = format_lines(values)

    # レポート用の表は表示済みの行から組み立てる（lookup をやり直さない）。
    table = rows_to_table(rows)

    if args.table is not None:
        args.table.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(args.table, index=False)
        print(f"Saved lookup table to {args.table}", file=sys.stderr)

    # 結果 JSON を出力
    if args.output is not None:
        output_path = args.output
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result = {
            "sequence": [int(v) for v in sequence],
            "descriptors": descriptors_to_config(descriptors),
            "fallback": FALLBACK,
            "values": [int(v) for v in values],
            "lines": lines,
            "config": config,
        }
        with output_path.open("w", encoding="utf-8") as handle:
            json.dump(result, handle, ensure_ascii=False, indent=2)
        print(f"Saved result JSON to {output_path}", file=sys.stderr)

    if wandb_logger is not None:
        wandb_logger.log_lookups(table)
        wandb_logger.log_metrics(
            {
                "n_descriptors": len(descriptors),
                "n_found": int(table["found"].sum()),
                "n_fallback": len(table) - int(table["found"].sum()),
            },
            prefix="summary",
        )
        wandb_logger.finish()


if __name__ == "__main__":
    # 直接実行時のみ main() を呼び出す（import された場合に副作用を起こさない）。
    main()
