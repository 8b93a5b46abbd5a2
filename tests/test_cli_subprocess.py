from __future__ import annotations

from pathlib import Path

import pytest

from exist_audit.core.exit_codes import ERR_TRAVERSAL
from helpers import golden_text, run_exist_audit

pytestmark = pytest.mark.integration


def test_module_entrypoint_matches_golden(xquery_tree: Path) -> None:
    proc = run_exist_audit(cwd=xquery_tree)
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == golden_text("report.txt.golden")


def test_repeated_runs_are_byte_identical(xquery_tree: Path) -> None:
    first = run_exist_audit(str(xquery_tree))
    second = run_exist_audit(str(xquery_tree))
    assert first.returncode == second.returncode == 0
    assert first.stdout == second.stdout


def test_unreadable_root_exits_non_zero(tmp_path: Path) -> None:
    proc = run_exist_audit(str(tmp_path / "absent"))
    assert proc.returncode == ERR_TRAVERSAL
    assert proc.stdout == ""
    assert "absent" in proc.stderr


def test_version_flag() -> None:
    proc = run_exist_audit("--version")
    assert proc.returncode == 0
    assert proc.stdout.startswith("exist-audit ")
