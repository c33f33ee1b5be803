from __future__ import annotations

import runpy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for sub in ("apps/cli", "packages/surface", "packages/renderer", "packages/core", "packages/toolkit"):
    sys.path.insert(0, str(ROOT / sub))

import glyphgrid_app.__main__ as app_main


def test_main_defaults_to_list_programs(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(app_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = app_main.main([])
    assert rc == 0
    assert calls == [["list-programs"]]


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(app_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = app_main.main(["doctor", "--export"])
    assert rc == 0
    assert calls == [["doctor", "--export"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = ROOT / "apps" / "cli" / "glyphgrid_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result
