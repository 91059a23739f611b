# tests/test_packaging.py

from __future__ import annotations

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def test_project_readme_is_the_user_readme() -> None:
    meta = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    assert meta["readme"] == "README.md"
    assert (ROOT / meta["readme"]).is_file()
