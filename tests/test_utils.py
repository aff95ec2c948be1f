"""Tests for configuration source reading and the convenience API."""

import io

import pytest

from tree_builder import build_registry, generate_tree
from tree_builder.codegen.core.config import GeneratorConfig
from tree_builder.codegen.core.writer import MemoryWriter
from tree_builder.dump import build_tree
from tree_builder.errors import SourceReadError, TreeBuildError
from tree_builder.utils import read_config, read_config_stream


class TestReadConfig:
    def test_file(self, tmp_path):
        path = tmp_path / "a.cfg"
        path.write_text("A()\n", encoding="utf-8")
        source, text = read_config(path)
        assert source == str(path)
        assert text == "A()\n"

    @pytest.mark.parametrize("source", ["-", None])
    def test_stdin(self, monkeypatch, source):
        monkeypatch.setattr("sys.stdin", io.StringIO("B()\n"))
        assert read_config(source) == ("<stdin>", "B()\n")

    def test_stream(self):
        assert read_config_stream(io.StringIO("C()"), "mem") == ("mem", "C()")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceReadError) as exc_info:
            read_config(tmp_path / "nope.cfg")
        assert issubclass(SourceReadError, TreeBuildError)
        assert exc_info.value.source == str(tmp_path / "nope.cfg")

    def test_directory(self, tmp_path):
        with pytest.raises(SourceReadError):
            read_config(tmp_path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.cfg"
        path.write_bytes(b"A(scalar \xe9)\n")
        with pytest.raises(SourceReadError, match="UTF-8"):
            read_config(path)


class TestConvenienceApi:
    def test_generate_tree_with_writer(self, expr_config):
        writer = MemoryWriter()
        result = generate_tree(expr_config, "perl", {"prefix": "Demo"}, writer)
        assert "Demo/Number.pm" in writer.files
        assert result.metadata["prefix"] == "Demo::"

    def test_generate_tree_with_config_object(self, expr_config):
        writer = MemoryWriter()
        generate_tree(
            expr_config, "python", GeneratorConfig(language="python"), writer
        )
        assert "Visitor.py" in writer.files


class TestDump:
    def test_hierarchy(self, expr_registry):
        tree = build_tree(expr_registry)
        (expr_node, expr_list_node) = tree.children
        assert "Expr" in str(expr_node.label)
        # Number hangs below Expr
        assert "Number" in str(expr_node.children[0].label)
        # EmptyExprList hangs below ExprList, after its two fields
        assert "EmptyExprList" in str(expr_list_node.children[-1].label)

    def test_empty_registry(self):
        assert build_tree(build_registry("")).children == []
