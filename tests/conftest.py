"""Pytest configuration for the rbmin test suite."""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

# Add the repository root to the path for rbmin imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rbmin.ast import Call, IntegerLit, LocalVarRead, StatementBlock  # noqa: E402

GOLDEN_DIR = Path(__file__).parent / "golden"


def var(name: str) -> LocalVarRead:
    return LocalVarRead(name)


def block(*stmts) -> StatementBlock:
    return StatementBlock(list(stmts))


def op(lhs, name: str, rhs) -> Call:
    """lhs <name> rhs as an infix call."""
    return Call(lhs, name, [rhs])


def call(name: str, *args, receiver=None) -> Call:
    return Call(receiver, name, list(args))


def num(value: int) -> IntegerLit:
    return IntegerLit(value)


@pytest.fixture
def ruby() -> str:
    """Path to a ruby interpreter; skips the test when none is installed."""
    path = shutil.which("ruby")
    if path is None:
        pytest.skip("ruby not installed")
    return path


@pytest.fixture
def run_ruby(ruby: str):
    """Run a Ruby program and return its stdout."""

    def run(source: str) -> str:
        result = subprocess.run(
            [ruby, "-e", source], capture_output=True, text=True, timeout=30
        )
        assert result.returncode == 0, result.stderr
        return result.stdout

    return run
