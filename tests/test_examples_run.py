from __future__ import annotations

import runpy
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.mark.parametrize(
    "script_path",
    sorted(EXAMPLES_DIR.glob("*.py"), key=lambda p: p.name),
    ids=lambda p: p.name,
)
def test_examples_run(script_path: Path, capsys) -> None:
    runpy.run_path(str(script_path), run_name="__main__")
    out = capsys.readouterr().out
    assert out.strip()
