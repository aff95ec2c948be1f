"""Shared fixtures for the tree_builder test suite."""

import sys

import pytest

from tree_builder import build_registry
from tree_builder.codegen.core.writer import MemoryWriter

EXPR_CONFIG = """\
# expression trees
abstract Expr()
Expr Number(scalar value)
ExprList(Expr, ExprList)
ExprList EmptyExprList()
"""

OPS_CONFIG = """\
abstract Expr()
Expr Number(scalar value)
abstract Expr Op()
Op Op::Plus(Expr, Expr)
Op Op::Neg(Expr operand)
"""


@pytest.fixture
def expr_config():
    return EXPR_CONFIG


@pytest.fixture
def expr_registry():
    return build_registry(EXPR_CONFIG)


@pytest.fixture
def ops_registry():
    return build_registry(OPS_CONFIG)


@pytest.fixture
def memory_writer():
    return MemoryWriter()


@pytest.fixture
def generated_modules(monkeypatch, tmp_path):
    """Make ``tmp_path`` importable and forget generated modules afterwards."""
    monkeypatch.syspath_prepend(str(tmp_path))
    before = set(sys.modules)
    yield tmp_path
    for name in set(sys.modules) - before:
        sys.modules.pop(name, None)
