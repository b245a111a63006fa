from __future__ import annotations

import json
import os
import sys
from subprocess import run as subprocess_run  # noqa: S404
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def _run_cli(args: list[str], tmp_path: Path):
    env = {
        **os.environ,
        "TEMPLATE_DIR": str(tmp_path / "templates"),
        "OUTPUT_DIR": str(tmp_path / "out"),
        "LOG_JSON": "false",
    }
    return subprocess_run(  # noqa: S603
        [sys.executable, "-m", "docfill.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=tmp_path,
        env=env,
    )


def test_template_scan_and_fill_flow(tmp_path: Path) -> None:
    source = tmp_path / "invoice.txt"
    source.write_text("Client: {{client}}\nTotal: {{total}}\n", encoding="utf-8")
    fields = tmp_path / "fields.json"
    fields.write_text(json.dumps([{"name": "reference", "kind": "text"}]), encoding="utf-8")
    values = tmp_path / "values.json"
    values.write_text(json.dumps({"client": "ACME", "total": "1 234,50", "reference": "INV-1"}), encoding="utf-8")

    created = _run_cli(["templates", "create", "--name", "Invoice", "--fields", str(fields)], tmp_path)
    assert created.returncode == 0, created.stderr
    template_id = created.stdout.split("\t")[0]

    scanned = _run_cli(["scan", "--input", str(source), "--template-id", template_id], tmp_path)
    assert scanned.returncode == 0, scanned.stderr
    names = [field["name"] for field in json.loads(scanned.stdout)["fields"]]
    assert names == ["reference", "client", "total"]

    filled = _run_cli(
        ["fill", "--input", str(source), "--values", str(values), "--template-id", template_id],
        tmp_path,
    )
    assert filled.returncode == 0, filled.stderr
    artifact = json.loads(filled.stdout)
    assert artifact["applied"] == ["client", "total"]
    assert (tmp_path / "out" / "invoice-filled.txt").read_text(encoding="utf-8") == (
        "Client: ACME\nTotal: 1 234,50\n"
    )


def test_fill_without_required_values_fails(tmp_path: Path) -> None:
    source = tmp_path / "letter.txt"
    source.write_text("Dear {{name}}", encoding="utf-8")
    values = tmp_path / "values.json"
    values.write_text("{}", encoding="utf-8")

    result = _run_cli(["fill", "--input", str(source), "--values", str(values)], tmp_path)

    assert result.returncode == 1
    assert not (tmp_path / "out").exists()
