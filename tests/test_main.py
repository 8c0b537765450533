from __future__ import annotations

import json
import os
import subprocess
import sys
import types
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import main as cli
from anyint.logger import WandBLogger


def _env() -> dict:
    return {**os.environ, "PYTHONPATH": str(ROOT)}


@pytest.fixture(autouse=True)
def _no_wandb(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WANDB_PROJECT", raising=False)
    monkeypatch.delenv("WANDB_ENABLED", raising=False)


def test_no_arguments_prints_default_scenario(capsys: pytest.CaptureFixture) -> None:
    cli.main([])
    out = capsys.readouterr().out
    if out.splitlines() != ["-1", "65", "-1", "25"]:
        raise AssertionError(f"unexpected stdout: {out!r}")


def test_config_output_and_table(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config_path = tmp_path / "scenario.json"
    config_path.write_text(
        json.dumps(
            {
                "sequence": [10, 20],
                "descriptors": [{"unsigned": 1}, {"signed": 0}, {"unsigned": 0}],
            }
        ),
        encoding="utf-8",
    )
    output_path = tmp_path / "out" / "result.json"
    table_path = tmp_path / "out" / "table.csv"
    cli.main(
        [
            "--config",
            str(config_path),
            "--output",
            str(output_path),
            "--table",
            str(table_path),
        ]
    )
    captured = capsys.readouterr()
    if captured.out.splitlines() != ["20", "-1", "10"]:
        raise AssertionError(f"unexpected stdout: {captured.out!r}")

    result = json.loads(output_path.read_text(encoding="utf-8"))
    if result["values"] != [20, -1, 10] or result["lines"] != ["20", "-1", "10"]:
        raise AssertionError(f"unexpected result JSON: {result}")
    if result["descriptors"] != [{"unsigned": 1}, {"signed": 0}, {"unsigned": 0}]:
        raise AssertionError(f"unexpected descriptors: {result['descriptors']}")

    table = pd.read_csv(table_path)
    if table["value"].tolist() != [20, -1, 10]:
        raise AssertionError(f"unexpected table: {table}")


def test_out_of_range_propagates(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config_path = tmp_path / "scenario.toml"
    config_path.write_text(
        "descriptors = [{ signed = 0 }, { unsigned = 5 }]\n", encoding="utf-8"
    )
    with pytest.raises(IndexError):
        cli.main(["--config", str(config_path)])
    out = capsys.readouterr().out
    if out.splitlines() != ["-1"]:
        raise AssertionError(f"lines before the failure should be printed: {out!r}")


def test_lines_before_out_of_range_are_printed(
    tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    config_path = tmp_path / "scenario.json"
    config_path.write_text(
        json.dumps({"descriptors": [{"signed": 3}, {"unsigned": 4}, {"unsigned": 5}]}),
        encoding="utf-8",
    )
    output_path = tmp_path / "result.json"
    with pytest.raises(IndexError):
        cli.main(["--config", str(config_path), "--output", str(output_path)])
    out = capsys.readouterr().out
    if out.splitlines() != ["-1", "65"]:
        raise AssertionError(f"unexpected stdout: {out!r}")
    if output_path.exists():
        raise AssertionError("no result JSON should be written for an aborted run")


def test_fallback_in_config_is_rejected(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config_path = tmp_path / "scenario.json"
    config_path.write_text(json.dumps({"fallback": 99}), encoding="utf-8")
    with pytest.raises(ValueError):
        cli.main(["--config", str(config_path)])
    if capsys.readouterr().out != "":
        raise AssertionError("nothing should be printed for a rejected config")


def test_absent_lookups_print_minus_one(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config_path = tmp_path / "scenario.toml"
    config_path.write_text(
        "sequence = [5, 6]\ndescriptors = [{ signed = 0 }, { signed = 1 }, { unsigned = 1 }]\n",
        encoding="utf-8",
    )
    cli.main(["--config", str(config_path)])
    out = capsys.readouterr().out
    if out.splitlines() != ["-1", "-1", "6"]:
        raise AssertionError(f"unexpected stdout: {out!r}")


def test_process_exit_codes(tmp_path: Path) -> None:
    ok = subprocess.run(
        [sys.executable, str(ROOT / "main.py")],
        cwd=ROOT,
        capture_output=True,
        text=True,
        env=_env(),
    )
    if ok.returncode != 0 or ok.stdout.splitlines() != ["-1", "65", "-1", "25"]:
        raise AssertionError(f"unexpected run: {ok.returncode} {ok.stdout!r} {ok.stderr!r}")

    config_path = tmp_path / "scenario.json"
    config_path.write_text(json.dumps({"descriptors": [{"unsigned": 5}]}), encoding="utf-8")
    bad = subprocess.run(
        [sys.executable, str(ROOT / "main.py"), "--config", str(config_path)],
        cwd=ROOT,
        capture_output=True,
        text=True,
        env=_env(),
    )
    if bad.returncode == 0:
        raise AssertionError("out-of-range run should exit non-zero")
    if bad.stdout != "":
        raise AssertionError(f"unexpected stdout: {bad.stdout!r}")
    if "IndexOutOfRangeError" not in bad.stderr:
        raise AssertionError(f"unexpected stderr: {bad.stderr!r}")


def test_disabled_logger_is_noop() -> None:
    logger = WandBLogger(project="anyint", enabled=False)
    logger.start_run(config={})
    logger.log_lookups(pd.DataFrame([{"kind": "signed", "index": 1}]))
    logger.log_metrics({"n": 1}, prefix="summary")
    logger.finish()


class _FakeWandB(types.ModuleType):
    """wandb.init / log / finish の呼び出しを記録するだけの代用モジュール。"""

    def __init__(self) -> None:
        super().__init__("wandb")
        self.inits = []
        self.logs = []
        self.finished = 0

    def init(self, **kwargs):
        self.inits.append(kwargs)
        return object()

    def log(self, payload, step=None) -> None:
        self.logs.append((step, dict(payload)))

    def finish(self) -> None:
        self.finished += 1


def test_wandb_logs_one_row_per_descriptor(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    fake = _FakeWandB()
    monkeypatch.setitem(sys.modules, "wandb", fake)
    monkeypatch.setenv("WANDB_PROJECT", "anyint-test")

    cli.main([])

    if capsys.readouterr().out.splitlines() != ["-1", "65", "-1", "25"]:
        raise AssertionError("stdout should hold only the result lines")
    if len(fake.inits) != 1 or fake.inits[0]["project"] != "anyint-test":
        raise AssertionError(f"unexpected init calls: {fake.inits}")
    if fake.finished != 1:
        raise AssertionError("run should be finished once")

    row_logs = [(step, p) for step, p in fake.logs if "lookup/value" in p]
    if [step for step, _ in row_logs] != [0, 1, 2, 3]:
        raise AssertionError(f"unexpected steps: {row_logs}")
    if [p["lookup/value"] for _, p in row_logs] != [-1, 65, -1, 25]:
        raise AssertionError(f"unexpected values: {row_logs}")
    if [p["lookup/kind"] for _, p in row_logs] != ["signed", "unsigned", "signed", "unsigned"]:
        raise AssertionError(f"unexpected kinds: {row_logs}")
    if [bool(p["lookup/found"]) for _, p in row_logs] != [False, True, False, True]:
        raise AssertionError(f"unexpected found flags: {row_logs}")

    summary = [p for _, p in fake.logs if "summary/n_descriptors" in p]
    if summary != [{"summary/n_descriptors": 4, "summary/n_found": 2, "summary/n_fallback": 2}]:
        raise AssertionError(f"unexpected summary: {summary}")


def main() -> None:
    test_disabled_logger_is_noop()
    print("OK: main tests passed (run with pytest for the CLI tests)")


if __name__ == "__main__":
    main()
