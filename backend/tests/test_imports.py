"""
Entry-point modules must import on their own, in a fresh interpreter.

The shared test session has usually loaded the packages in a friendly order
already, so each import here runs in a subprocess.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).parent.parent


@pytest.mark.parametrize(
    "module",
    [
        "models.schemas",
        "authentication.auth",
        "services",
        "routers.complaints_router",
        "init_db",
        "main",
    ],
)
def test_imports_cleanly_first(module):
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=BACKEND_DIR,
        env={**os.environ, "PYTHONPATH": str(BACKEND_DIR)},
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert result.returncode == 0, result.stderr
