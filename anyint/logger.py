"""WandB ロギング用のユーティリティ。

方針:
    - WandB は任意依存。未インストールでも lookup 自体は動作させる。
    - ロギングは lookup / driver から分離し、外側（main）で利用する。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import pandas as pd


def _import_wandb():
    try:
        import importlib

        return importlib.import_module("wandb")
    except ImportError as exc:
        raise RuntimeError(
            "wandb がインストールされていません。"
            " `pip install wandb` を実行するか、ロギングを無効化してください。"
        ) from exc


def wandb_available() -> bool:
    """wandb が利用可能かを返す。"""

    try:
        _import_wandb()
        return True
    except RuntimeError:
        return False


@dataclass
class WandBLogger:
    """WandB へのロギングを行うクラス。"""

    project: str
    entity: Optional[str] = None
    name: Optional[str] = None
    tags: Optional[Iterable[str]] = None
    enabled: bool = True
    _run: Any = field(default=None, init=False, repr=False)

    def start_run(
        self,
        config: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        """WandB run を開始する。"""

        if not self.enabled:
            return
        wandb = _import_wandb()
        self._run = wandb.init(
            project=self.project,
            entity=self.entity,
            name=name or self.name,
            tags=list(self.tags) if self.tags else None,
            config=config,
        )

    def log_lookups(self, table: pd.DataFrame, prefix: str = "lookup") -> None:
        """記述子 1 つにつき 1 ステップとして lookup 結果を記録する。"""

        if not self.enabled:
            return
        wandb = _import_wandb()
        for step, row in enumerate(table.to_dict(orient="records")):
            payload = {f"{prefix}/{key}": value for key, value in row.items()}
            wandb.log(payload, step=step)

    def log_metrics(
        self,
        metrics: Dict[str, Any],
        step: Optional[int] = None,
        prefix: Optional[str] = None,
    ) -> None:
        """集計値をログに送る。"""

        if not self.enabled:
            return
        wandb = _import_wandb()
        if prefix:
            payload = {f"{prefix}/{key}": value for key, value in metrics.items()}
        else:
            payload = dict(metrics)
        wandb.log(payload, step=step)

    def finish(self) -> None:
        """WandB run を終了する。"""

        if not self.enabled:
            return
        wandb = _import_wandb()
        wandb.finish()
        self._run = None
