import ast
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "src" / "archiplan"
ENTRY_POINTS = {"cli.py"}

LIBRARY_MODULES = sorted(
    path for path in PACKAGE_ROOT.rglob("*.py") if path.name not in ENTRY_POINTS
)


@pytest.mark.parametrize(
    "path", LIBRARY_MODULES, ids=lambda path: str(path.relative_to(PACKAGE_ROOT))
)
def test_library_modules_import_the_package_relatively(path):
    tree = ast.parse(path.read_text(encoding="utf-8"))
    absolute = [
        node.module
        for node in ast.walk(tree)
        if isinstance(node, ast.ImportFrom)
        and node.level == 0
        and node.module
        and node.module.split(".")[0] == "archiplan"
    ]
    assert absolute == []
